"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the API layer.
"""

from abc import ABC, abstractmethod

from src.core.models import TranscriptionResult


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, audio: bytes, mime_type: str = "audio/webm", **kwargs) -> TranscriptionResult:
        """Transcribe an uploaded audio payload to text.

        Args:
            audio: Encoded audio bytes as uploaded by the client.
            mime_type: Declared MIME type, used to pick the decoder.
            **kwargs: Provider-specific options.

        Returns:
            TranscriptionResult; empty text means no speech was detected.
        """
