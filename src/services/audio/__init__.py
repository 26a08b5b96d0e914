"""
Audio module - Microphone capture and encoding utilities.
"""

from .capture import AudioCapture, CaptureState
from .processor import AudioProcessor

__all__ = ["AudioCapture", "AudioProcessor", "CaptureState"]
