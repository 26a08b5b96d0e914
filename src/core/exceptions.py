"""
CraftConnect exception hierarchy.

All application-specific exceptions inherit from CraftConnectError,
enabling centralized error handling in the API middleware layer.
``error`` is the short summary sent to clients; ``detail`` carries the
optional extra explanation returned as ``details``.
"""

from datetime import UTC, datetime


class CraftConnectError(Exception):
    """Base exception for all CraftConnect errors."""

    def __init__(
        self,
        error: str = "Internal server error",
        detail: str | None = None,
        code: str = "CRAFTCONNECT_ERROR",
        status_code: int = 500,
    ) -> None:
        self.error = error
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail or error)


# ---------------------------------------------------------------------------
# Upload / validation (400)
# ---------------------------------------------------------------------------


class UploadValidationError(CraftConnectError):
    """Raised when an upload or request body is rejected; the user must retry."""

    def __init__(
        self,
        error: str = "File upload error",
        detail: str | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(error=error, detail=detail, code=code, status_code=400)


class MissingAudioError(UploadValidationError):
    """Raised when the multipart body carries no ``audio`` file."""

    def __init__(self) -> None:
        super().__init__(error="Audio file is required.", code="MISSING_AUDIO")


class InvalidFileTypeError(UploadValidationError):
    """Raised when the uploaded file is not an accepted audio type."""

    def __init__(self, mime_type: str) -> None:
        super().__init__(
            error="Invalid file type",
            detail=f"Invalid file type: {mime_type}. Only audio files are allowed.",
            code="INVALID_FILE_TYPE",
        )


class FileTooLargeError(UploadValidationError):
    """Raised when the upload exceeds the configured size limit."""

    def __init__(self, limit_bytes: int) -> None:
        super().__init__(
            error="File upload error",
            detail=f"File too large (limit {limit_bytes} bytes)",
            code="LIMIT_FILE_SIZE",
        )


class NoSpeechDetectedError(UploadValidationError):
    """Raised when transcription produced no text."""

    def __init__(self) -> None:
        super().__init__(
            error="Could not detect any speech in the audio.",
            code="NO_SPEECH",
        )


# ---------------------------------------------------------------------------
# Upstream services
# ---------------------------------------------------------------------------


class UpstreamUnavailableError(CraftConnectError):
    """Raised when a Google Cloud service cannot be reached.

    ``reason`` keeps the underlying failure for server logs; clients only
    see the fixed ``detail``.
    """

    def __init__(self, reason: str = "") -> None:
        self.reason = reason
        super().__init__(
            error="Google Cloud API unavailable",
            detail="Unable to connect to Google Cloud services",
            code="UPSTREAM_UNAVAILABLE",
            status_code=503,
        )

    def __str__(self) -> str:
        return self.reason or self.detail or self.error


class TranscriptionError(CraftConnectError):
    """Raised when STT processing fails."""

    def __init__(self, detail: str = "Transcription failed") -> None:
        super().__init__(
            error="An error occurred during AI analysis.",
            detail=detail,
            code="TRANSCRIPTION_ERROR",
            status_code=500,
        )


class AnalysisParseError(CraftConnectError):
    """Raised when model output is not a valid business analysis."""

    def __init__(self, detail: str = "Model returned an invalid analysis") -> None:
        super().__init__(
            error="An error occurred during AI analysis.",
            detail=detail,
            code="ANALYSIS_PARSE_ERROR",
            status_code=500,
        )


class MessageGenerationError(CraftConnectError):
    """Raised when WhatsApp message generation fails."""

    def __init__(self, detail: str = "Message generation failed") -> None:
        super().__init__(
            error="Failed to generate message.",
            detail=detail,
            code="MESSAGE_GENERATION_ERROR",
            status_code=500,
        )


class RateLimitExceededError(CraftConnectError):
    """Raised when a client address exhausts its request budget."""

    def __init__(self) -> None:
        super().__init__(
            error="Too many requests from this IP, please try again later.",
            code="RATE_LIMITED",
            status_code=429,
        )


# ---------------------------------------------------------------------------
# Client side
# ---------------------------------------------------------------------------


class RecordingTooShortError(CraftConnectError):
    """Raised when a recording is stopped or submitted before the minimum duration."""

    def __init__(self, duration: float, minimum: float) -> None:
        self.duration = duration
        self.minimum = minimum
        super().__init__(
            error=f"Recording too short. Please speak for at least {minimum:g} seconds.",
            detail=f"Recorded {duration:.1f}s, minimum is {minimum:g}s",
            code="RECORDING_TOO_SHORT",
            status_code=400,
        )


class MicrophoneUnavailableError(CraftConnectError):
    """Raised when the microphone cannot be opened (denied or missing)."""

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(
            error="Microphone access denied. Please allow microphone access and try again.",
            detail=detail,
            code="MICROPHONE_UNAVAILABLE",
            status_code=400,
        )


class FlowTransitionError(CraftConnectError):
    """Raised when a flow action is not valid for the current step."""

    def __init__(self, action: str, step: str) -> None:
        super().__init__(
            error="Invalid flow transition",
            detail=f"Cannot apply {action} while at step '{step}'",
            code="INVALID_FLOW_TRANSITION",
            status_code=409,
        )
