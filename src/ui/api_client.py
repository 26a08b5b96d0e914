"""
Synchronous HTTP client for the CraftConnect backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts run synchronously.
The client refuses recordings below the minimum duration before any
network call, and never retries: a failed upload means re-recording.
"""

import logging

import httpx
import streamlit as st

from src.core.config import get_settings
from src.core.exceptions import RecordingTooShortError
from src.core.models import AnalyzeBusinessResponse, AudioRecording

logger = logging.getLogger(__name__)


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    Used by the UI to display appropriate error messages.
    """

    def __init__(self, message: str, category: str = "unknown", status_code: int | None = None) -> None:
        self.message = message
        self.category = category
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed responses or raise ``APIError`` with
    user-friendly messages for display in the UI.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        min_recording_seconds: float | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the backend API, including the ``/api`` prefix.
            timeout: Request-level timeout in seconds.
            min_recording_seconds: Recordings shorter than this are never sent.
        """
        settings = get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._min_recording_seconds = (
            min_recording_seconds
            if min_recording_seconds is not None
            else settings.min_recording_seconds
        )
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout or settings.request_timeout_seconds,
        )

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: Endpoint path relative to the API base (e.g. "/health").
            **kwargs: Passed through to httpx (json, files, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn src.api.app:app --reload --port 5000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. Please record again and retry.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                body = exc.response.json()
                message = body.get("error") or exc.response.text
            except Exception:
                message = exc.response.text or str(exc)
            raise APIError(
                str(message), category="http", status_code=exc.response.status_code
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    # -- analysis --

    def submit_recording(self, recording: AudioRecording) -> AnalyzeBusinessResponse:
        """Upload a recording for transcription and business analysis.

        Raises:
            RecordingTooShortError: Below the minimum duration; nothing is sent.
            APIError: On any transport or server failure.
        """
        if recording.duration < self._min_recording_seconds:
            raise RecordingTooShortError(
                duration=recording.duration, minimum=self._min_recording_seconds
            )
        files = {"audio": (recording.filename, recording.data, recording.mime_type)}
        resp = self._request("post", "/analyze-business", files=files)
        return AnalyzeBusinessResponse.model_validate(resp.json())

    def generate_whatsapp_message(
        self, business_type: str, detected_focus: str, transcript: str
    ) -> str:
        """Ask the backend for a WhatsApp Business message."""
        body = {
            "businessType": business_type,
            "detectedFocus": detected_focus,
            "transcript": transcript,
        }
        return self._request("post", "/generate-whatsapp-message", json=body).json()["message"]

    def close(self) -> None:
        self._client.close()


@st.cache_resource
def get_api_client(base_url: str | None = None) -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    """
    return APIClient(base_url=base_url)
