"""
FastAPI dependency providers for the speech and analysis services.

Providers return process-wide instances so SDK clients are reused across
requests. Tests replace them through ``app.dependency_overrides``.
"""

from functools import lru_cache

from src.services.analysis import BusinessAnalyzer
from src.services.llm import create_llm
from src.services.transcription import BaseSTT, create_stt


@lru_cache
def get_stt() -> BaseSTT:
    """Speech-to-Text adapter shared by all requests."""
    return create_stt(provider="google")


@lru_cache
def get_analyzer() -> BusinessAnalyzer:
    """Business analyzer backed by the Vertex AI model."""
    return BusinessAnalyzer(create_llm(provider="vertex"))
