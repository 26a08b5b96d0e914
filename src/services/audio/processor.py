"""Audio encoding and inspection for captured voice memos.

Encodes raw int16 PCM into an uploadable container (Ogg/Opus when the
installed libsndfile supports it, WAV otherwise) and measures the duration
of recordings produced by the browser widget.
"""

import io

import numpy as np
import soundfile as sf

from src.core.exceptions import RecordingTooShortError
from src.core.models import AudioRecording

OPUS_MIME_TYPE = "audio/ogg;codecs=opus"
WAV_MIME_TYPE = "audio/wav"


class AudioProcessor:
    """Handles PCM encoding and duration checks.

    Args:
        sample_rate: Capture sample rate in Hz (48 kHz matches the recognizer).
        channels: Number of audio channels (1 = mono).
        prefer_opus: Try Ogg/Opus before falling back to WAV.
    """

    def __init__(
        self,
        sample_rate: int = 48000,
        channels: int = 1,
        prefer_opus: bool = True,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.prefer_opus = prefer_opus

    def negotiate_format(self) -> tuple[str, str, str]:
        """Pick the container for encoding.

        Returns:
            ``(mime_type, soundfile_format, soundfile_subtype)``.
        """
        if self.prefer_opus and sf.check_format("OGG", "OPUS"):
            return OPUS_MIME_TYPE, "OGG", "OPUS"
        return WAV_MIME_TYPE, "WAV", "PCM_16"

    def encode(self, pcm: np.ndarray) -> tuple[bytes, str]:
        """Encode int16 PCM frames into a single audio payload.

        Args:
            pcm: Array shaped ``(frames, channels)`` or ``(frames,)``.

        Returns:
            ``(payload_bytes, mime_type)``.

        Raises:
            ValueError: If ``pcm`` holds no frames.
        """
        if pcm.size == 0:
            raise ValueError("Cannot encode an empty recording")
        mime_type, fmt, subtype = self.negotiate_format()
        buffer = io.BytesIO()
        sf.write(buffer, pcm, self.sample_rate, format=fmt, subtype=subtype)
        return buffer.getvalue(), mime_type

    @staticmethod
    def measure_duration(data: bytes) -> float:
        """Duration in seconds of an encoded payload soundfile can read."""
        info = sf.info(io.BytesIO(data))
        return float(info.duration)

    def inspect_recording(
        self,
        data: bytes,
        mime_type: str,
        min_duration: float,
    ) -> AudioRecording:
        """Wrap browser-captured bytes, refusing recordings below ``min_duration``.

        Raises:
            RecordingTooShortError: If the audio is shorter than the minimum.
        """
        duration = self.measure_duration(data)
        if duration < min_duration:
            raise RecordingTooShortError(duration=duration, minimum=min_duration)
        return AudioRecording(data=data, mime_type=mime_type, duration=duration)
