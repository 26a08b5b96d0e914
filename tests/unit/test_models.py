"""Tests for the shared request/response models and domain errors."""

import pytest
from pydantic import ValidationError

from src.core.exceptions import RecordingTooShortError, UpstreamUnavailableError
from src.core.models import (
    AudioRecording,
    RecommendedSolutions,
    SolutionId,
    TranscriptionResult,
    WhatsAppMessageRequest,
    base_mime_type,
)


class TestAudioRecording:
    @pytest.mark.parametrize(
        ("mime", "filename"),
        [
            ("audio/webm;codecs=opus", "recording.webm"),
            ("audio/ogg;codecs=opus", "recording.ogg"),
            ("audio/wav", "recording.wav"),
            ("application/octet-stream", "recording.webm"),
        ],
    )
    def test_filename(self, mime, filename):
        assert AudioRecording(data=b"x", mime_type=mime).filename == filename

    def test_base_mime_type(self):
        assert base_mime_type("Audio/WebM; codecs=opus") == "audio/webm"


def test_transcription_whitespace_is_empty():
    assert TranscriptionResult(text=" \n ").is_empty
    assert not TranscriptionResult(text="hello").is_empty


class TestRecommendedSolutions:
    def test_alternative_is_remaining_channel(self):
        solutions = RecommendedSolutions.model_validate(
            {
                "primary": {"id": "whatsapp", "reason": "a"},
                "secondary": {"id": "website", "reason": "b"},
            }
        )
        assert solutions.alternative == SolutionId.instagram

    def test_rejects_duplicates(self):
        with pytest.raises(ValidationError):
            RecommendedSolutions.model_validate(
                {
                    "primary": {"id": "whatsapp", "reason": "a"},
                    "secondary": {"id": "whatsapp", "reason": "b"},
                }
            )


class TestWhatsAppMessageRequest:
    def test_accepts_camel_case(self):
        body = WhatsAppMessageRequest.model_validate(
            {"businessType": "Pottery", "detectedFocus": "bowls"}
        )
        assert body.business_type == "Pottery"
        assert body.transcript == ""

    def test_requires_business_type(self):
        with pytest.raises(ValidationError):
            WhatsAppMessageRequest.model_validate({"businessType": ""})


def test_upstream_error_keeps_reason_private():
    exc = UpstreamUnavailableError("socket closed")
    assert exc.status_code == 503
    assert exc.detail == "Unable to connect to Google Cloud services"
    assert str(exc) == "socket closed"


def test_recording_too_short_message():
    exc = RecordingTooShortError(duration=4.2, minimum=10.0)
    assert exc.error == "Recording too short. Please speak for at least 10 seconds."
    assert exc.code == "RECORDING_TOO_SHORT"
