"""
Business analysis REST endpoints.

``POST /analyze-business`` runs upload validation, transcription and
analysis in sequence; ``POST /generate-whatsapp-message`` composes
marketing copy from an earlier analysis. Services are injected via
``src.api.dependencies``.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import ValidationError

from src.api.dependencies import get_analyzer, get_stt
from src.core.config import get_settings
from src.core.exceptions import (
    CraftConnectError,
    FileTooLargeError,
    InvalidFileTypeError,
    MissingAudioError,
    NoSpeechDetectedError,
    UploadValidationError,
)
from src.core.models import (
    AnalyzeBusinessResponse,
    WhatsAppMessageRequest,
    WhatsAppMessageResponse,
    base_mime_type,
)
from src.services.analysis import BusinessAnalyzer
from src.services.transcription import BaseSTT

logger = logging.getLogger(__name__)

router = APIRouter(tags=["business"])

# Browsers sometimes label recorded audio as video/webm
ALLOWED_AUDIO_TYPES = frozenset(
    {
        "audio/webm",
        "audio/wav",
        "audio/mp3",
        "audio/mpeg",
        "audio/ogg",
        "audio/mp4",
        "video/webm",
    }
)


def is_allowed_audio(mime_type: str | None, filename: str | None) -> bool:
    """Accept allow-listed MIME types, or any ``.webm`` file name."""
    if mime_type and base_mime_type(mime_type) in ALLOWED_AUDIO_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".webm")


async def read_audio_upload(upload: UploadFile | None, max_bytes: int) -> bytes:
    """Validate an ``audio`` upload and return its bytes.

    Raises:
        MissingAudioError: No file (or an empty one) was sent.
        InvalidFileTypeError: The MIME type / file name is not accepted.
        FileTooLargeError: The payload exceeds ``max_bytes``.
    """
    if upload is None:
        raise MissingAudioError()

    logger.info(
        "File upload - mimetype: %s, originalname: %s",
        upload.content_type,
        upload.filename,
    )
    if not is_allowed_audio(upload.content_type, upload.filename):
        raise InvalidFileTypeError(upload.content_type or "unknown")

    # Read one byte past the limit so oversized uploads are detected without
    # buffering the whole body.
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise FileTooLargeError(max_bytes)
    if not data:
        raise MissingAudioError()
    return data


@router.post("/analyze-business", response_model=AnalyzeBusinessResponse)
async def analyze_business(
    stt: Annotated[BaseSTT, Depends(get_stt)],
    analyzer: Annotated[BusinessAnalyzer, Depends(get_analyzer)],
    audio: UploadFile | None = File(None),
) -> AnalyzeBusinessResponse:
    """Transcribe an uploaded voice memo and analyse the business it describes."""
    settings = get_settings()
    payload = await read_audio_upload(audio, settings.max_upload_bytes)
    mime_type = audio.content_type or "audio/webm"

    try:
        logger.info("1. Transcribing audio (%d bytes, %s)...", len(payload), mime_type)
        transcription = await stt.transcribe(payload, mime_type=mime_type)
        if transcription.is_empty:
            raise NoSpeechDetectedError()
        logger.info("2. Transcription complete: %s", transcription.text)

        logger.info("3. Analyzing transcript with Vertex AI...")
        analysis = await analyzer.analyze(transcription.text)
        logger.info("4. Analysis complete: %s", analysis.business_type)
    except CraftConnectError:
        raise
    except Exception as exc:
        raise CraftConnectError(
            error="An error occurred during AI analysis.",
            detail=str(exc),
            code="ANALYSIS_FAILED",
        ) from exc

    return AnalyzeBusinessResponse(transcript=transcription.text, analysis=analysis)


async def _read_message_request(request: Request) -> WhatsAppMessageRequest:
    """Parse the message request from a JSON or form body.

    File parts (an optional ``image``) are ignored.
    """
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(("multipart/form-data", "application/x-www-form-urlencoded")):
            form = await request.form()
            data = {key: value for key, value in form.items() if isinstance(value, str)}
        else:
            data = await request.json()
    except ValueError as exc:
        raise UploadValidationError(
            error="Invalid request", detail=f"Body must be JSON or form data: {exc}"
        ) from exc

    try:
        return WhatsAppMessageRequest.model_validate(data)
    except ValidationError as exc:
        raise UploadValidationError(error="Invalid request", detail=str(exc)) from exc


@router.post("/generate-whatsapp-message", response_model=WhatsAppMessageResponse)
async def generate_whatsapp_message(
    request: Request,
    analyzer: Annotated[BusinessAnalyzer, Depends(get_analyzer)],
) -> WhatsAppMessageResponse:
    """Generate a WhatsApp Business message for an analysed business."""
    body = await _read_message_request(request)
    logger.info("WhatsApp message generation requested for %s", body.business_type)
    message = await analyzer.compose_message(
        business_type=body.business_type,
        detected_focus=body.detected_focus,
        transcript=body.transcript,
    )
    return WhatsAppMessageResponse(message=message)
