# ABOUTME: Pytest configuration and shared fixtures
# ABOUTME: Sets the test environment before the app is imported and provides faked upstream services
import os
import tempfile

# Must be set before podcast_api.main is imported: the app refuses to start without a key
_TEST_DATA_DIR = tempfile.mkdtemp(prefix="podcast-api-tests-")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("ELEVENLABS_API_KEY", "test-elevenlabs-key")
os.environ.setdefault("UPLOADS_DIR", os.path.join(_TEST_DATA_DIR, "uploads"))
os.environ.setdefault("AUDIO_DIR", os.path.join(_TEST_DATA_DIR, "audio"))
os.environ.setdefault("RATE_LIMIT_REQUESTS_PER_MINUTE", "10000")

import httpx
import pytest

from tests.upstream_fakes import FakeUpstream, SAMPLE_AUDIO, SAMPLE_SCRIPT, gemini_payload


@pytest.fixture
def fake_upstream():
    """Factory for FakeUpstream instances."""
    return FakeUpstream


@pytest.fixture
def gemini_ok():
    """Upstream answering every generation call with a short script."""
    return FakeUpstream(lambda request: httpx.Response(200, json=gemini_payload(SAMPLE_SCRIPT)))


@pytest.fixture
def elevenlabs_ok():
    """Upstream answering every synthesis call with a small audio body."""
    return FakeUpstream(
        lambda request: httpx.Response(200, content=SAMPLE_AUDIO, headers={"Content-Type": "audio/mpeg"})
    )
