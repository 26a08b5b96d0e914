"""Integration tests for the business analysis endpoints.

Runs the full request path (rate limiter, upload validation, routing,
error envelope) with mocked Speech-to-Text and Gemini providers.
"""

import json

import pytest

from src.core.config import get_settings
from src.core.exceptions import UpstreamUnavailableError
from src.core.models import TranscriptionResult


def _audio(data: bytes, mime: str = "audio/webm", name: str = "recording.webm"):
    return {"audio": (name, data, mime)}


# ---------------------------------------------------------------------------
# POST /api/analyze-business
# ---------------------------------------------------------------------------


class TestAnalyzeBusiness:
    async def test_pottery_story(self, client, mock_stt, mock_llm, webm_bytes):
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["transcript"].startswith("I make handmade ceramic bowls")
        analysis = body["analysis"]
        assert analysis["businessType"] == "Pottery & Ceramics"
        assert analysis["recommendedSolutions"]["primary"]["id"] == "instagram"
        assert analysis["recommendedSolutions"]["secondary"]["id"] == "whatsapp"
        assert 80 <= analysis["confidence"] <= 95

        mock_stt.transcribe.assert_awaited_once()
        args, kwargs = mock_stt.transcribe.call_args
        assert args[0] == webm_bytes
        assert kwargs["mime_type"] == "audio/webm"
        prompt = mock_llm.generate.call_args[0][0]
        assert "ceramic bowls" in prompt

    async def test_video_webm_accepted(self, client, webm_bytes):
        resp = await client.post(
            "/api/analyze-business", files=_audio(webm_bytes, mime="video/webm")
        )
        assert resp.status_code == 200

    async def test_webm_filename_accepted_with_generic_type(self, client, webm_bytes):
        resp = await client.post(
            "/api/analyze-business",
            files=_audio(webm_bytes, mime="application/octet-stream", name="memo.webm"),
        )
        assert resp.status_code == 200

    async def test_invalid_file_type_rejected_before_any_upstream_call(
        self, client, mock_stt, mock_llm
    ):
        resp = await client.post(
            "/api/analyze-business",
            files=_audio(
                b"\x89PNG\r\n\x1a\n" + b"\x00" * (3 * 1024 * 1024),
                mime="image/png",
                name="photo.png",
            ),
        )

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Invalid file type"
        assert body["code"] == "INVALID_FILE_TYPE"
        assert "image/png" in body["details"]
        mock_stt.transcribe.assert_not_called()
        mock_llm.generate.assert_not_called()

    async def test_oversized_upload_rejected(self, client, mock_stt, monkeypatch):
        monkeypatch.setenv("MAX_UPLOAD_BYTES", "1024")
        get_settings.cache_clear()
        resp = await client.post("/api/analyze-business", files=_audio(b"\x00" * 2048))

        assert resp.status_code == 400
        body = resp.json()
        assert body["error"] == "File upload error"
        assert body["code"] == "LIMIT_FILE_SIZE"
        mock_stt.transcribe.assert_not_called()

    async def test_missing_audio(self, client, mock_stt):
        resp = await client.post("/api/analyze-business", data={"note": "no file"})

        assert resp.status_code == 400
        assert resp.json()["error"] == "Audio file is required."
        mock_stt.transcribe.assert_not_called()

    async def test_empty_audio_file(self, client, mock_stt):
        resp = await client.post("/api/analyze-business", files=_audio(b""))
        assert resp.status_code == 400
        assert resp.json()["code"] == "MISSING_AUDIO"

    async def test_no_speech_skips_analysis(self, client, mock_stt, mock_llm, webm_bytes):
        mock_stt.transcribe.return_value = TranscriptionResult(text="   ")
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))

        assert resp.status_code == 400
        assert resp.json()["error"] == "Could not detect any speech in the audio."
        mock_llm.generate.assert_not_called()

    async def test_upstream_unavailable_returns_503(self, client, mock_stt, webm_bytes):
        mock_stt.transcribe.side_effect = UpstreamUnavailableError("connection refused")
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))

        assert resp.status_code == 503
        body = resp.json()
        assert body["error"] == "Google Cloud API unavailable"
        assert body["details"] == "Unable to connect to Google Cloud services"
        assert "connection refused" not in json.dumps(body)

    async def test_unparseable_model_output_returns_500(self, client, mock_llm, webm_bytes):
        mock_llm.generate.return_value = "Sure! Here is your analysis: pottery."
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "An error occurred during AI analysis."

    async def test_fenced_model_output_is_accepted(self, client, mock_llm, analysis_json, webm_bytes):
        mock_llm.generate.return_value = f"```json\n{analysis_json}\n```"
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))
        assert resp.status_code == 200

    async def test_unexpected_failure_hides_message_in_production(
        self, client, mock_stt, monkeypatch, webm_bytes
    ):
        monkeypatch.setenv("ENVIRONMENT", "production")
        get_settings.cache_clear()
        mock_stt.transcribe.side_effect = ValueError("secret internals")
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))

        assert resp.status_code == 500
        body = resp.json()
        assert body["error"] == "An error occurred during AI analysis."
        assert "secret internals" not in json.dumps(body)

    async def test_unexpected_failure_shows_message_in_development(
        self, client, mock_stt, webm_bytes
    ):
        mock_stt.transcribe.side_effect = ValueError("decoder exploded")
        resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))

        assert resp.status_code == 500
        assert resp.json()["message"] == "decoder exploded"


# ---------------------------------------------------------------------------
# POST /api/generate-whatsapp-message
# ---------------------------------------------------------------------------


class TestGenerateWhatsAppMessage:
    @pytest.fixture(autouse=True)
    def _message_reply(self, mock_llm):
        mock_llm.generate.return_value = "Hello! \U0001f44b Welcome to our pottery studio."

    async def test_json_body(self, client, mock_llm):
        resp = await client.post(
            "/api/generate-whatsapp-message",
            json={
                "businessType": "Pottery & Ceramics",
                "detectedFocus": "ceramic bowls, vases",
                "transcript": "I make bowls",
            },
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "message": "Hello! \U0001f44b Welcome to our pottery studio.",
        }
        prompt = mock_llm.generate.call_args[0][0]
        assert "Type: Pottery & Ceramics" in prompt
        assert "Products/Focus: ceramic bowls, vases" in prompt
        assert '"I make bowls"' in prompt

    async def test_multipart_body_ignores_image(self, client, mock_llm):
        resp = await client.post(
            "/api/generate-whatsapp-message",
            data={"businessType": "Handmade Jewelry", "detectedFocus": "rings"},
            files={"image": ("logo.png", b"\x89PNG", "image/png")},
        )

        assert resp.status_code == 200
        assert "Type: Handmade Jewelry" in mock_llm.generate.call_args[0][0]

    async def test_missing_business_type(self, client, mock_llm):
        resp = await client.post(
            "/api/generate-whatsapp-message", json={"detectedFocus": "rings"}
        )

        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid request"
        mock_llm.generate.assert_not_called()

    async def test_malformed_json(self, client):
        resp = await client.post(
            "/api/generate-whatsapp-message",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        assert resp.status_code == 400

    async def test_generation_failure(self, client, mock_llm):
        mock_llm.generate.side_effect = RuntimeError("Vertex AI error: quota")
        resp = await client.post(
            "/api/generate-whatsapp-message", json={"businessType": "Pottery"}
        )

        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to generate message."

    async def test_upstream_unavailable(self, client, mock_llm):
        mock_llm.generate.side_effect = UpstreamUnavailableError("dns failure")
        resp = await client.post(
            "/api/generate-whatsapp-message", json={"businessType": "Pottery"}
        )
        assert resp.status_code == 503


# ---------------------------------------------------------------------------
# Record -> analyze -> message
# ---------------------------------------------------------------------------


async def test_analysis_feeds_whatsapp_message(client, mock_llm, analysis_json, webm_bytes):
    """A WhatsApp-first analysis drives the follow-up message request."""
    analysis = json.loads(analysis_json)
    analysis["recommendedSolutions"] = {
        "primary": {"id": "whatsapp", "reason": "Regulars already message you."},
        "secondary": {"id": "website", "reason": "A catalog for new buyers."},
    }
    mock_llm.generate.side_effect = [
        json.dumps(analysis),
        "Hi! \U0001f3fa Handmade bowls and vases, reply to order yours.",
    ]

    resp = await client.post("/api/analyze-business", files=_audio(webm_bytes))
    assert resp.status_code == 200
    body = resp.json()
    solutions = body["analysis"]["recommendedSolutions"]
    assert solutions["primary"]["id"] == "whatsapp"
    assert solutions["secondary"]["id"] == "website"

    resp = await client.post(
        "/api/generate-whatsapp-message",
        json={
            "businessType": body["analysis"]["businessType"],
            "detectedFocus": body["analysis"]["detectedFocus"],
            "transcript": body["transcript"],
        },
    )
    assert resp.status_code == 200
    assert resp.json()["message"].strip()
    prompt = mock_llm.generate.call_args[0][0]
    assert "Type: Pottery & Ceramics" in prompt
    assert mock_llm.generate.await_count == 2
