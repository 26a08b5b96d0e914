"""
Pydantic v2 request / response models used across the API and UI layers.

Wire JSON uses camelCase (``businessType``); Python code uses snake_case
attributes. ``CamelModel`` provides the alias mapping for both directions.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthServices(BaseModel):
    """Whether each external collaborator has credentials configured."""

    speech: bool
    vertexai: bool
    vision: bool


class HealthResponse(BaseModel):
    """GET /api/health response."""

    status: str = "OK"
    timestamp: datetime
    uptime: float
    environment: str
    services: HealthServices


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

_MIME_EXTENSIONS = {
    "audio/webm": "webm",
    "video/webm": "webm",
    "audio/ogg": "ogg",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "m4a",
}


def base_mime_type(mime_type: str) -> str:
    """Strip parameters: ``"audio/webm;codecs=opus"`` -> ``"audio/webm"``."""
    return mime_type.split(";", 1)[0].strip().lower()


class AudioRecording(BaseModel):
    """A captured voice memo held client-side until it is uploaded."""

    data: bytes
    mime_type: str = "audio/webm;codecs=opus"
    duration: float = 0.0

    @property
    def filename(self) -> str:
        """Upload file name; webm stays ``recording.webm`` like the browser client."""
        ext = _MIME_EXTENSIONS.get(base_mime_type(self.mime_type), "webm")
        return f"recording.{ext}"


class TranscriptionResult(BaseModel):
    """Text output of speech recognition for one upload."""

    text: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.text.strip()


# ---------------------------------------------------------------------------
# Business analysis
# ---------------------------------------------------------------------------


class SolutionId(StrEnum):
    """Fixed set of business-growth channels the analysis may recommend."""

    whatsapp = "whatsapp"
    instagram = "instagram"
    website = "website"


class SolutionRecommendation(CamelModel):
    """One recommended channel plus the model's reason for it."""

    id: SolutionId
    reason: str


class RecommendedSolutions(CamelModel):
    """Primary and secondary recommendation; the two must differ."""

    primary: SolutionRecommendation
    secondary: SolutionRecommendation

    @model_validator(mode="after")
    def _distinct_solutions(self) -> "RecommendedSolutions":
        if self.primary.id == self.secondary.id:
            raise ValueError(
                f"primary and secondary solutions must differ (both '{self.primary.id}')"
            )
        return self

    @property
    def alternative(self) -> SolutionId:
        """The channel that was not recommended."""
        chosen = {self.primary.id, self.secondary.id}
        return next(s for s in SolutionId if s not in chosen)


class BusinessAnalysis(CamelModel):
    """Structured extraction of a business description."""

    business_type: str
    detected_focus: str
    top_problems: list[str]
    recommended_solutions: RecommendedSolutions
    confidence: int = Field(ge=80, le=95)


# ---------------------------------------------------------------------------
# API envelopes
# ---------------------------------------------------------------------------


class AnalyzeBusinessResponse(CamelModel):
    """POST /api/analyze-business success body."""

    success: bool = True
    transcript: str
    analysis: BusinessAnalysis


class WhatsAppMessageRequest(CamelModel):
    """POST /api/generate-whatsapp-message body (JSON or form fields)."""

    business_type: str = Field(min_length=1)
    detected_focus: str = ""
    transcript: str = ""


class WhatsAppMessageResponse(CamelModel):
    """POST /api/generate-whatsapp-message success body."""

    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    success: bool = False
    error: str
    details: str | None = None
    code: str | None = None
