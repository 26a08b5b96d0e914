"""Local microphone capture with a minimum-duration gate.

``AudioCapture`` is an explicit state machine::

    idle -> capturing -> stopping -> ready
      ^_________|____________|  (close / error)

``stop()`` is refused until the minimum duration has elapsed. A single
finalize step releases the input stream and encodes the buffered blocks,
so the OS audio handle is released on every exit path.
"""

import logging
import threading
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any

import numpy as np

from src.core.config import get_settings
from src.core.exceptions import MicrophoneUnavailableError, RecordingTooShortError
from src.core.models import AudioRecording
from src.services.audio.processor import AudioProcessor

try:
    import sounddevice as sd
except OSError:  # PortAudio shared library missing
    sd = None

logger = logging.getLogger(__name__)


class CaptureState(StrEnum):
    idle = "idle"
    capturing = "capturing"
    stopping = "stopping"
    ready = "ready"


class AudioCapture:
    """Records mono int16 audio from the default input device.

    Args:
        min_duration: Seconds that must elapse before ``stop()`` is honored
            (defaults to ``settings.min_recording_seconds``).
        sample_rate: Capture rate in Hz.
        channels: Number of input channels.
        block_seconds: Length of each buffered block.
        clock: Monotonic time source (injectable for tests).
        processor: Encoder for the finished recording.
    """

    def __init__(
        self,
        min_duration: float | None = None,
        sample_rate: int = 48000,
        channels: int = 1,
        block_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        processor: AudioProcessor | None = None,
    ) -> None:
        self.min_duration = (
            min_duration if min_duration is not None else get_settings().min_recording_seconds
        )
        self.sample_rate = sample_rate
        self.channels = channels
        self.block_seconds = block_seconds
        self._clock = clock
        self._processor = processor or AudioProcessor(sample_rate=sample_rate, channels=channels)
        self._lock = threading.Lock()
        self._stream: Any = None
        self._blocks: list[np.ndarray] = []
        self._started_at: float | None = None
        self._state = CaptureState.idle
        self.recording: AudioRecording | None = None

    @property
    def state(self) -> CaptureState:
        return self._state

    @property
    def elapsed(self) -> float:
        """Seconds since capture started (0 when not capturing)."""
        if self._started_at is None or self._state != CaptureState.capturing:
            return 0.0
        return self._clock() - self._started_at

    @property
    def can_stop(self) -> bool:
        return self._state == CaptureState.capturing and self.elapsed >= self.min_duration

    def start(self) -> None:
        """Open the input stream and begin buffering blocks.

        Raises:
            MicrophoneUnavailableError: If no input device can be opened.
            RuntimeError: If capture is not idle.
        """
        if self._state != CaptureState.idle:
            raise RuntimeError(f"Cannot start capture while {self._state}")
        if sd is None:
            raise MicrophoneUnavailableError("PortAudio library is not available")

        self._blocks = []
        self.recording = None
        try:
            self._stream = sd.InputStream(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="int16",
                blocksize=int(self.sample_rate * self.block_seconds),
                callback=self._on_audio,
            )
            self._stream.start()
        except sd.PortAudioError as exc:
            self._release()
            logger.warning("Microphone unavailable: %s", exc)
            raise MicrophoneUnavailableError(str(exc)) from exc

        self._started_at = self._clock()
        self._state = CaptureState.capturing
        logger.info("Capture started (rate=%d, channels=%d)", self.sample_rate, self.channels)

    def _on_audio(self, indata: Any, frames: int, time_info: Any, status: Any) -> None:
        if status:
            logger.debug("Input stream status: %s", status)
        with self._lock:
            if self._state == CaptureState.capturing:
                self._blocks.append(np.array(indata, dtype=np.int16, copy=True))

    def stop(self) -> AudioRecording:
        """Finish capture and return the encoded recording.

        Raises:
            RecordingTooShortError: Before the minimum duration; capture continues.
            RuntimeError: If capture is not running.
        """
        if self._state != CaptureState.capturing:
            raise RuntimeError(f"Cannot stop capture while {self._state}")
        elapsed = self.elapsed
        if elapsed < self.min_duration:
            raise RecordingTooShortError(duration=elapsed, minimum=self.min_duration)

        with self._lock:
            self._state = CaptureState.stopping
        return self._finalize(elapsed)

    def _finalize(self, duration: float) -> AudioRecording:
        """Release the stream, then encode buffered blocks into one payload."""
        try:
            self._release()
            with self._lock:
                blocks, self._blocks = self._blocks, []
            if blocks:
                pcm = np.concatenate(blocks)
            else:
                pcm = np.zeros((0, self.channels), dtype=np.int16)
            data, mime_type = self._processor.encode(pcm)
        except Exception:
            self._state = CaptureState.idle
            raise

        self.recording = AudioRecording(data=data, mime_type=mime_type, duration=duration)
        self._state = CaptureState.ready
        logger.info(
            "Capture finished: %.1fs, %d bytes, %s", duration, len(data), mime_type
        )
        return self.recording

    def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            stream.stop()
        finally:
            stream.close()

    def close(self) -> None:
        """Release the microphone on any exit path and discard partial audio."""
        self._release()
        with self._lock:
            if self._state in (CaptureState.capturing, CaptureState.stopping):
                self._state = CaptureState.idle
                self._blocks = []
        self._started_at = None

    def reset(self) -> None:
        """Return to idle, dropping any finished recording."""
        self.close()
        self._state = CaptureState.idle
        self.recording = None

    def __enter__(self) -> "AudioCapture":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
