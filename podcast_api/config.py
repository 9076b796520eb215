# ABOUTME: Configuration system for the podcast generator service with environment variable handling
# ABOUTME: Provides Settings singleton with validation; missing generation credential is fatal

import os
from typing import List, Literal

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Settings:
    """
    Configuration settings for the podcast generator service.
    Singleton class that loads configuration from environment variables
    with validation and defaults.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        # Always re-initialize to pick up environment changes (tests rely on this)
        self._gemini_api_key = self._get_gemini_api_key()
        self._gemini_model = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
        self._gemini_base_url = os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        ).rstrip("/")
        self._elevenlabs_api_key = os.getenv("ELEVENLABS_API_KEY", "")
        self._elevenlabs_voice_id = os.getenv("ELEVENLABS_VOICE_ID", "21m00Tcm4TlvDq8ikWAM")
        self._elevenlabs_base_url = os.getenv(
            "ELEVENLABS_BASE_URL", "https://api.elevenlabs.io/v1"
        ).rstrip("/")
        self._uploads_dir = os.getenv("UPLOADS_DIR", "uploads")
        self._audio_dir = os.getenv("AUDIO_DIR", "public/audio")
        self._upstream_timeout_sec = self._get_positive_float("UPSTREAM_TIMEOUT_SEC", "60")
        self._timeout_sec = self._get_positive_int("TIMEOUT_SEC", "300")
        self._cors_allow_origins = self._get_cors_allow_origins()
        self._log_level = self._get_log_level()
        self._rate_limit_requests_per_minute = self._get_positive_int(
            "RATE_LIMIT_REQUESTS_PER_MINUTE", "60"
        )
        self._host = os.getenv("HOST", "0.0.0.0")
        self._port = self._get_positive_int("PORT", "9000")

    @classmethod
    def _reset_instance(cls):
        """Reset singleton instance for testing purposes only."""
        cls._instance = None

    def _get_gemini_api_key(self) -> str:
        """Get GEMINI_API_KEY; the service cannot start without it."""
        api_key = os.getenv("GEMINI_API_KEY", "").strip()
        if not api_key:
            raise ValueError("GEMINI_API_KEY must be set")
        return api_key

    def _get_positive_int(self, name: str, default: str) -> int:
        value = int(os.getenv(name, default))
        if value <= 0:
            raise ValueError(f"{name} must be positive")
        return value

    def _get_positive_float(self, name: str, default: str) -> float:
        value = float(os.getenv(name, default))
        if value <= 0:
            raise ValueError(f"{name} must be positive")
        return value

    def _get_cors_allow_origins(self) -> List[str]:
        """Parse comma-separated CORS_ALLOW_ORIGINS environment variable."""
        origins_str = os.getenv("CORS_ALLOW_ORIGINS", "")

        if not origins_str.strip():
            return []

        return [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    def _get_log_level(self) -> Literal["debug", "info", "warning", "error", "critical"]:
        """Get and validate LOG_LEVEL environment variable."""
        log_level = os.getenv("LOG_LEVEL", "info").lower()

        valid_levels = ["debug", "info", "warning", "error", "critical"]

        if log_level not in valid_levels:
            raise ValueError(
                f"Invalid log level: {log_level}. "
                f"Valid levels: {', '.join(valid_levels)}"
            )

        return log_level

    @property
    def gemini_api_key(self) -> str:
        return self._gemini_api_key

    @property
    def gemini_model(self) -> str:
        return self._gemini_model

    @property
    def gemini_base_url(self) -> str:
        return self._gemini_base_url

    @property
    def elevenlabs_api_key(self) -> str:
        return self._elevenlabs_api_key

    @property
    def elevenlabs_voice_id(self) -> str:
        return self._elevenlabs_voice_id

    @property
    def elevenlabs_base_url(self) -> str:
        return self._elevenlabs_base_url

    @property
    def uploads_dir(self) -> str:
        return self._uploads_dir

    @property
    def audio_dir(self) -> str:
        return self._audio_dir

    @property
    def upstream_timeout_sec(self) -> float:
        return self._upstream_timeout_sec

    @property
    def timeout_sec(self) -> int:
        return self._timeout_sec

    @property
    def cors_allow_origins(self) -> List[str]:
        return self._cors_allow_origins.copy()  # Return copy to prevent mutation

    @property
    def log_level(self) -> str:
        return self._log_level

    @property
    def rate_limit_requests_per_minute(self) -> int:
        return self._rate_limit_requests_per_minute

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def synthesis_configured(self) -> bool:
        return bool(self._elevenlabs_api_key and self._elevenlabs_voice_id)


def get_settings() -> Settings:
    """Get the global settings instance."""
    return Settings()
