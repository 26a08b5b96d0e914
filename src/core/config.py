"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """CraftConnect application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        google_project_id: Google Cloud project hosting Vertex AI.
        google_application_credentials: Service-account key path used by the
            Speech-to-Text client.
        vertex_model: Gemini model identifier used for analysis and copywriting.
        environment: "development" exposes error details in 500 responses.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Google Cloud ---
    google_project_id: str = ""
    google_location: str = "us-central1"
    google_application_credentials: str = ""

    # --- Vertex AI (Gemini) ---
    vertex_model: str = "gemini-2.0-flash"
    vertex_temperature: float = 0.4

    # --- Speech-to-Text ---
    # Fixed recognition configuration for recorded voice memos
    speech_language_code: str = "en-US"
    speech_sample_rate_hertz: int = 48000
    speech_model: str = "latest_long"

    # Number of attempts for upstream calls; 1 = fail fast, no retry
    upstream_max_attempts: int = 1

    # --- Uploads ---
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB
    min_recording_seconds: float = 10.0

    # --- Rate limiting (per client address on /api/ routes) ---
    rate_limit_window_seconds: int = 15 * 60
    rate_limit_max_development: int = 100
    rate_limit_max_production: int = 50

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 5000
    client_url: str = "http://localhost:8501"  # Allowed CORS origin (Streamlit)
    environment: str = "development"
    log_level: str = "INFO"  # Python logging level

    # --- UI ---
    api_base_url: str = "http://localhost:5000/api"
    request_timeout_seconds: float = 30.0

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    @property
    def rate_limit_max_requests(self) -> int:
        """Request budget per window; more lenient while developing."""
        if self.is_development:
            return self.rate_limit_max_development
        return self.rate_limit_max_production


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
