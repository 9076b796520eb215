# ABOUTME: Test cases for configuration system validating environment variable handling
# ABOUTME: Ensures Settings loads, validates, and provides defaults; missing generation key is fatal

import os
from unittest.mock import patch

import pytest

from podcast_api.config import Settings, get_settings

_MANAGED_VARS = [
    "GEMINI_MODEL",
    "GEMINI_BASE_URL",
    "ELEVENLABS_API_KEY",
    "ELEVENLABS_VOICE_ID",
    "ELEVENLABS_BASE_URL",
    "UPLOADS_DIR",
    "AUDIO_DIR",
    "UPSTREAM_TIMEOUT_SEC",
    "TIMEOUT_SEC",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
    "RATE_LIMIT_REQUESTS_PER_MINUTE",
    "HOST",
    "PORT",
]


class TestSettings:
    """Test configuration loading and validation."""

    @pytest.fixture(autouse=True)
    def clean_environment(self):
        """Run each test against a minimal environment and a fresh singleton."""
        env = {k: v for k, v in os.environ.items() if k not in _MANAGED_VARS}
        env["GEMINI_API_KEY"] = "test-key"
        Settings._reset_instance()
        with patch.dict(os.environ, env, clear=True):
            yield
        Settings._reset_instance()

    def test_default_values(self):
        settings = Settings()

        assert settings.gemini_api_key == "test-key"
        assert settings.gemini_model == "gemini-1.5-flash"
        assert settings.gemini_base_url == "https://generativelanguage.googleapis.com/v1beta"
        assert settings.elevenlabs_api_key == ""
        assert settings.elevenlabs_voice_id == "21m00Tcm4TlvDq8ikWAM"
        assert settings.elevenlabs_base_url == "https://api.elevenlabs.io/v1"
        assert settings.uploads_dir == "uploads"
        assert settings.audio_dir == "public/audio"
        assert settings.upstream_timeout_sec == 60.0
        assert settings.timeout_sec == 300
        assert settings.cors_allow_origins == []
        assert settings.log_level == "info"
        assert settings.rate_limit_requests_per_minute == 60
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000

    def test_environment_variable_override(self):
        with patch.dict(os.environ, {
            "GEMINI_MODEL": "gemini-2.0-flash",
            "GEMINI_BASE_URL": "https://proxy.example.com/v1beta/",
            "ELEVENLABS_API_KEY": "eleven",
            "ELEVENLABS_VOICE_ID": "voice-xyz",
            "UPLOADS_DIR": "/data/uploads",
            "AUDIO_DIR": "/data/audio",
            "UPSTREAM_TIMEOUT_SEC": "12.5",
            "TIMEOUT_SEC": "600",
            "CORS_ALLOW_ORIGINS": "http://localhost:3000,https://example.com",
            "LOG_LEVEL": "DEBUG",
            "RATE_LIMIT_REQUESTS_PER_MINUTE": "5",
            "PORT": "8080",
        }):
            settings = Settings()

            assert settings.gemini_model == "gemini-2.0-flash"
            assert settings.gemini_base_url == "https://proxy.example.com/v1beta"
            assert settings.elevenlabs_api_key == "eleven"
            assert settings.elevenlabs_voice_id == "voice-xyz"
            assert settings.uploads_dir == "/data/uploads"
            assert settings.audio_dir == "/data/audio"
            assert settings.upstream_timeout_sec == 12.5
            assert settings.timeout_sec == 600
            assert settings.cors_allow_origins == ["http://localhost:3000", "https://example.com"]
            assert settings.log_level == "debug"
            assert settings.rate_limit_requests_per_minute == 5
            assert settings.port == 8080

    @pytest.mark.parametrize("value", ["", "   "])
    def test_missing_gemini_key_is_fatal(self, value):
        with patch.dict(os.environ, {"GEMINI_API_KEY": value}):
            with pytest.raises(ValueError, match="GEMINI_API_KEY"):
                Settings()

    def test_synthesis_configured_flag(self):
        assert Settings().synthesis_configured is False

        with patch.dict(os.environ, {"ELEVENLABS_API_KEY": "eleven"}):
            assert Settings().synthesis_configured is True

    @pytest.mark.parametrize("origins_str,expected", [
        ("", []),
        ("http://localhost:3000", ["http://localhost:3000"]),
        ("http://localhost:3000,https://example.com", ["http://localhost:3000", "https://example.com"]),
        ("http://localhost:3000, https://example.com,", ["http://localhost:3000", "https://example.com"]),
    ])
    def test_cors_origins_parsing(self, origins_str, expected):
        with patch.dict(os.environ, {"CORS_ALLOW_ORIGINS": origins_str}):
            assert Settings().cors_allow_origins == expected

    @pytest.mark.parametrize("name,value", [
        ("TIMEOUT_SEC", "0"),
        ("TIMEOUT_SEC", "-1"),
        ("UPSTREAM_TIMEOUT_SEC", "0"),
        ("RATE_LIMIT_REQUESTS_PER_MINUTE", "-5"),
        ("PORT", "0"),
    ])
    def test_validation_positive_numbers(self, name, value):
        with patch.dict(os.environ, {name: value}):
            with pytest.raises(ValueError, match="must be positive"):
                Settings()

    def test_validation_log_level(self):
        for level in ["debug", "info", "warning", "error", "critical"]:
            with patch.dict(os.environ, {"LOG_LEVEL": level}):
                assert Settings().log_level == level

        with patch.dict(os.environ, {"LOG_LEVEL": "invalid"}):
            with pytest.raises(ValueError, match="Invalid log level"):
                Settings()

    def test_singleton_behavior(self):
        settings1 = Settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_immutability(self):
        settings = Settings()

        with pytest.raises(AttributeError):
            settings.gemini_model = "other-model"

    def test_cors_origins_copy_is_returned(self):
        with patch.dict(os.environ, {"CORS_ALLOW_ORIGINS": "https://example.com"}):
            settings = Settings()

        settings.cors_allow_origins.append("https://evil.com")
        assert settings.cors_allow_origins == ["https://example.com"]
