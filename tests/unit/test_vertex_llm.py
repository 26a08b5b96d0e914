"""Unit tests for the VertexLLM (Gemini) provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from google.genai import errors

from src.core.exceptions import UpstreamUnavailableError
from src.services.llm import create_llm
from src.services.llm.vertex import VertexLLM

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _mock_settings(**overrides):
    """Return a fake Settings object with sensible defaults."""
    defaults = {
        "google_project_id": "craft-demo",
        "google_location": "us-central1",
        "vertex_model": "gemini-2.0-flash",
        "vertex_temperature": 0.4,
        "upstream_max_attempts": 1,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def _server_error(code: int) -> errors.ServerError:
    return errors.ServerError(code, {"error": {"code": code, "message": "boom", "status": "X"}})


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_client():
    """Return a mock mimicking ``genai.Client`` with an async models API."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(
        return_value=SimpleNamespace(text='{"businessType": "Pottery"}')
    )
    return client


@pytest.fixture
def llm(mock_client):
    """Create a VertexLLM with a mocked Gen AI client."""
    with patch("src.services.llm.vertex.get_settings", return_value=_mock_settings()):
        instance = VertexLLM()
    instance._client = mock_client
    return instance


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestVertexLLMInit:
    def test_defaults_from_settings(self):
        with patch("src.services.llm.vertex.get_settings", return_value=_mock_settings()):
            llm = VertexLLM()

        assert llm._project == "craft-demo"
        assert llm._model == "gemini-2.0-flash"
        assert llm._temperature == 0.4
        assert llm._max_attempts == 1

    def test_explicit_args_override_settings(self):
        with patch("src.services.llm.vertex.get_settings", return_value=_mock_settings()):
            llm = VertexLLM(project="other", model="gemini-1.5-pro", temperature=0.0)

        assert llm._project == "other"
        assert llm._model == "gemini-1.5-pro"
        assert llm._temperature == 0.0

    def test_client_created_lazily_in_vertex_mode(self):
        with patch("src.services.llm.vertex.get_settings", return_value=_mock_settings()):
            llm = VertexLLM()
        with patch("src.services.llm.vertex.genai.Client") as mock_cls:
            assert mock_cls.call_count == 0
            llm._get_client()
            llm._get_client()

        mock_cls.assert_called_once_with(
            vertexai=True, project="craft-demo", location="us-central1"
        )

    def test_factory_creates_vertex(self):
        with patch("src.services.llm.vertex.get_settings", return_value=_mock_settings()):
            assert isinstance(create_llm("vertex"), VertexLLM)

    def test_factory_rejects_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm("openai")


# ---------------------------------------------------------------------------
# generate()
# ---------------------------------------------------------------------------


class TestGenerate:
    async def test_returns_text(self, llm, mock_client):
        result = await llm.generate("Analyze this")

        assert result == '{"businessType": "Pottery"}'
        kwargs = mock_client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert kwargs["contents"] == "Analyze this"
        assert kwargs["config"].temperature == 0.4

    async def test_temperature_override(self, llm, mock_client):
        await llm.generate("p", temperature=0.9)
        assert mock_client.aio.models.generate_content.call_args.kwargs["config"].temperature == 0.9

    async def test_empty_text_becomes_empty_string(self, llm, mock_client):
        mock_client.aio.models.generate_content.return_value = SimpleNamespace(text=None)
        assert await llm.generate("p") == ""

    async def test_connect_error_is_upstream_unavailable(self, llm, mock_client):
        mock_client.aio.models.generate_content.side_effect = httpx.ConnectError("refused")

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await llm.generate("p")
        assert "refused" in exc_info.value.reason

    async def test_503_is_upstream_unavailable(self, llm, mock_client):
        mock_client.aio.models.generate_content.side_effect = _server_error(503)
        with pytest.raises(UpstreamUnavailableError):
            await llm.generate("p")

    async def test_other_server_error_is_runtime_error(self, llm, mock_client):
        mock_client.aio.models.generate_content.side_effect = _server_error(500)
        with pytest.raises(RuntimeError, match="Vertex AI error"):
            await llm.generate("p")

    async def test_fails_fast_by_default(self, llm, mock_client):
        mock_client.aio.models.generate_content.side_effect = httpx.ConnectError("refused")
        with pytest.raises(UpstreamUnavailableError):
            await llm.generate("p")
        assert mock_client.aio.models.generate_content.await_count == 1

    async def test_retries_when_configured(self, mock_client):
        settings = _mock_settings(upstream_max_attempts=2)
        with patch("src.services.llm.vertex.get_settings", return_value=settings):
            llm = VertexLLM()
        llm._client = mock_client
        mock_client.aio.models.generate_content.side_effect = [
            httpx.ConnectError("refused"),
            SimpleNamespace(text="ok"),
        ]

        with patch("asyncio.sleep", new=AsyncMock()):
            assert await llm.generate("p") == "ok"
        assert mock_client.aio.models.generate_content.await_count == 2
