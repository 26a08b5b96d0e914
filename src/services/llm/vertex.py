"""
Vertex AI (Gemini) LLM provider implementation.

Uses the Google Gen AI SDK (``google.genai``) in Vertex AI mode. The client
is created lazily so the API can start without Google credentials (the
health endpoint reports them as missing instead).
"""

import logging

import httpx
from google import genai
from google.genai import errors, types
from tenacity import retry, retry_if_exception_type, wait_exponential

from src.core.config import get_settings
from src.core.exceptions import UpstreamUnavailableError
from src.core.utils import stop_after_configured_attempts
from src.services.llm.base import BaseLLM

logger = logging.getLogger(__name__)


class VertexLLM(BaseLLM):
    """Gemini on Vertex AI, reached through ``genai.Client(vertexai=True)``."""

    def __init__(
        self,
        project: str | None = None,
        location: str | None = None,
        model: str | None = None,
        temperature: float | None = None,
        max_attempts: int | None = None,
    ) -> None:
        settings = get_settings()
        self._project = project or settings.google_project_id
        self._location = location or settings.google_location
        self._model = model or settings.vertex_model
        self._temperature = (
            temperature if temperature is not None else settings.vertex_temperature
        )
        self._max_attempts = max(1, max_attempts or settings.upstream_max_attempts)
        self._client: genai.Client | None = None

    def _get_client(self) -> genai.Client:
        """Return the Gen AI client, creating it on first use."""
        if self._client is None:
            logger.info(
                "Creating Vertex AI client (project=%s, location=%s, model=%s)",
                self._project or "NOT_SET",
                self._location,
                self._model,
            )
            self._client = genai.Client(
                vertexai=True,
                project=self._project or None,
                location=self._location,
            )
        return self._client

    @retry(
        stop=stop_after_configured_attempts,
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type(UpstreamUnavailableError),
        reraise=True,
    )
    async def _call_api(self, prompt: str, temperature: float | None = None) -> str:
        """Send one ``generate_content`` request and return the text part.

        Connectivity failures become ``UpstreamUnavailableError``; anything
        else the SDK raises becomes ``RuntimeError``.
        """
        try:
            response = await self._get_client().aio.models.generate_content(
                model=self._model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    temperature=temperature if temperature is not None else self._temperature,
                ),
            )
        except (httpx.ConnectError, httpx.ConnectTimeout, ConnectionError) as exc:
            logger.warning("Vertex AI connection error: %s", exc)
            raise UpstreamUnavailableError(f"Failed to connect to Vertex AI: {exc}") from exc
        except errors.ServerError as exc:
            if exc.code == 503:
                logger.warning("Vertex AI unavailable: %s", exc)
                raise UpstreamUnavailableError(f"Vertex AI unavailable: {exc}") from exc
            logger.error("Vertex AI server error: %s", exc)
            raise RuntimeError(f"Vertex AI error: {exc}") from exc
        except errors.APIError as exc:
            logger.error("Vertex AI API error: %s", exc)
            raise RuntimeError(f"Vertex AI error: {exc}") from exc

        return response.text or ""

    async def generate(self, prompt: str, **kwargs) -> str:
        """Generate a free-form text response."""
        temperature = kwargs.pop("temperature", None)
        return await self._call_api(prompt, temperature=temperature)
