"""Shared pytest fixtures for the CraftConnect test suite.

Provides mock LLM/STT providers, a canned business analysis and an
application wired to those mocks through dependency overrides.
"""

import io
import json
from unittest.mock import AsyncMock

import numpy as np
import pytest
import soundfile as sf
from httpx import ASGITransport, AsyncClient

from src.core.config import get_settings
from src.core.models import TranscriptionResult

POTTERY_TRANSCRIPT = (
    "I make handmade ceramic bowls and vases in my home studio. "
    "I want more customers but I only sell at the weekend market."
)

POTTERY_ANALYSIS = {
    "businessType": "Pottery & Ceramics",
    "detectedFocus": "ceramic bowls, vases",
    "topProblems": ["Only sells at the weekend market", "Wants more customers"],
    "recommendedSolutions": {
        "primary": {"id": "instagram", "reason": "Pottery is highly visual."},
        "secondary": {"id": "whatsapp", "reason": "Easy custom orders from regulars."},
    },
    "confidence": 88,
}


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so env overrides in one test never leak."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# LLM Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def analysis_json() -> str:
    return json.dumps(POTTERY_ANALYSIS)


@pytest.fixture
def mock_llm(analysis_json):
    """Create a mock LLM provider returning a valid analysis.

    Returns:
        AsyncMock: A mock implementing the BaseLLM interface.
    """
    from src.services.llm.base import BaseLLM

    llm = AsyncMock(spec=BaseLLM)
    llm.generate.return_value = analysis_json
    return llm


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider that recognises the pottery story.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface.
    """
    from src.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = TranscriptionResult(text=POTTERY_TRANSCRIPT)
    return stt


# ---------------------------------------------------------------------------
# Application Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def app(mock_stt, mock_llm):
    """Fresh FastAPI app whose services are replaced by the mocks."""
    from src.api.app import create_app
    from src.api.dependencies import get_analyzer, get_stt
    from src.services.analysis import BusinessAnalyzer

    application = create_app()
    application.dependency_overrides[get_stt] = lambda: mock_stt
    application.dependency_overrides[get_analyzer] = lambda: BusinessAnalyzer(mock_llm)
    return application


@pytest.fixture
async def client(app):
    """AsyncClient talking to the app in-process."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Audio Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def webm_bytes() -> bytes:
    """Opaque bytes standing in for a browser webm/opus upload."""
    return b"\x1aE\xdf\xa3" + b"\x00" * 2048


@pytest.fixture
def make_wav():
    """Factory encoding a 440 Hz tone of the given length as 16-bit mono WAV."""

    def _make(seconds: float, sample_rate: int = 16000) -> bytes:
        t = np.arange(int(seconds * sample_rate)) / sample_rate
        tone = (0.5 * np.sin(2 * np.pi * 440.0 * t) * 32767).astype(np.int16)
        buffer = io.BytesIO()
        sf.write(buffer, tone, sample_rate, format="WAV", subtype="PCM_16")
        return buffer.getvalue()

    return _make
