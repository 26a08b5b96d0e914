"""Google Cloud Speech-to-Text implementation.

Submits the whole upload in a single synchronous ``recognize`` call with a
fixed recognition configuration. The blocking gRPC client runs in a worker
thread via ``asyncio.to_thread`` and is created lazily on first use.
"""

import asyncio
import logging

from google.api_core import exceptions as gcp_exceptions
from google.auth import exceptions as auth_exceptions
from google.cloud import speech
from tenacity import retry, retry_if_exception_type, wait_exponential

from src.core.config import get_settings
from src.core.exceptions import TranscriptionError, UpstreamUnavailableError
from src.core.models import TranscriptionResult, base_mime_type
from src.core.utils import stop_after_configured_attempts
from src.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

_Encoding = speech.RecognitionConfig.AudioEncoding

# MIME type -> (encoding, send sample rate). WAV carries its rate in the header.
_ENCODINGS = {
    "audio/webm": (_Encoding.WEBM_OPUS, True),
    "video/webm": (_Encoding.WEBM_OPUS, True),
    "audio/ogg": (_Encoding.OGG_OPUS, True),
    "audio/wav": (_Encoding.LINEAR16, False),
    "audio/x-wav": (_Encoding.LINEAR16, False),
    "audio/mpeg": (_Encoding.MP3, True),
    "audio/mp3": (_Encoding.MP3, True),
}
_DEFAULT_ENCODING = (_Encoding.WEBM_OPUS, True)


class GoogleSpeechSTT(BaseSTT):
    """Speech-to-text provider backed by ``google.cloud.speech.SpeechClient``.

    Args:
        language_code: BCP-47 language of the recording.
        sample_rate_hertz: Sample rate sent for Opus / MP3 payloads.
        model: Recognition model name.
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        language_code: str | None = None,
        sample_rate_hertz: int | None = None,
        model: str | None = None,
        settings=None,
    ) -> None:
        self._settings = settings or get_settings()
        self._language_code = language_code or self._settings.speech_language_code
        self._sample_rate_hertz = sample_rate_hertz or self._settings.speech_sample_rate_hertz
        self._model = model or self._settings.speech_model
        self._max_attempts = max(1, self._settings.upstream_max_attempts)
        self._client: speech.SpeechClient | None = None

    def _get_client(self) -> speech.SpeechClient:
        if self._client is None:
            logger.info("Creating Speech-to-Text client")
            self._client = speech.SpeechClient()
        return self._client

    def build_config(self, mime_type: str) -> speech.RecognitionConfig:
        """Recognition config matching the recorder's negotiated encoding."""
        encoding, send_rate = _ENCODINGS.get(base_mime_type(mime_type), _DEFAULT_ENCODING)
        config = speech.RecognitionConfig(
            encoding=encoding,
            language_code=self._language_code,
            enable_automatic_punctuation=True,
            model=self._model,
        )
        if send_rate:
            config.sample_rate_hertz = self._sample_rate_hertz
        return config

    def _recognize(self, audio: bytes, config: speech.RecognitionConfig):
        """Blocking recognize call; run via asyncio.to_thread()."""
        return self._get_client().recognize(
            config=config,
            audio=speech.RecognitionAudio(content=audio),
        )

    @retry(
        stop=stop_after_configured_attempts,
        wait=wait_exponential(multiplier=1, min=1, max=16),
        retry=retry_if_exception_type(UpstreamUnavailableError),
        reraise=True,
    )
    async def _call_api(self, audio: bytes, config: speech.RecognitionConfig):
        """Run one recognize call, translating SDK errors to domain errors."""
        try:
            return await asyncio.to_thread(self._recognize, audio, config)
        except gcp_exceptions.ServiceUnavailable as exc:
            logger.warning("Speech-to-Text unavailable: %s", exc)
            raise UpstreamUnavailableError(f"Speech-to-Text unavailable: {exc}") from exc
        except (gcp_exceptions.GoogleAPICallError, auth_exceptions.GoogleAuthError) as exc:
            raise TranscriptionError(detail=f"Speech-to-Text failed: {exc}") from exc

    @staticmethod
    def _join_results(response) -> str:
        """Newline-join each result's top alternative, in service order."""
        return "\n".join(
            result.alternatives[0].transcript
            for result in response.results
            if result.alternatives
        )

    async def transcribe(
        self, audio: bytes, mime_type: str = "audio/webm", **kwargs
    ) -> TranscriptionResult:
        """Transcribe an uploaded audio payload.

        Raises:
            UpstreamUnavailableError: If Speech-to-Text cannot be reached.
            TranscriptionError: For any other recognition failure.
        """
        config = self.build_config(mime_type)
        response = await self._call_api(audio, config)

        text = self._join_results(response)
        logger.info("Transcription complete (%d chars)", len(text))
        return TranscriptionResult(text=text)
