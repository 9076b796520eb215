# ABOUTME: Test suite for Pydantic request/response models and service exceptions
# ABOUTME: Validates field defaults, wire names, and the error hierarchy used by the handlers
import pytest
from pydantic import ValidationError

from podcast_api.models.errors import (
    InvalidInputError,
    PodcastServiceError,
    StorageError,
    UpstreamError,
)
from podcast_api.models.requests import TextToSpeechRequest, TranscriptRequest
from podcast_api.models.responses import (
    ConnectionCheckMessage,
    ErrorResponse,
    GenerationResult,
    HealthStatus,
    Segment,
    SynthesisResult,
)


class TestRequestModels:

    def test_transcript_is_optional_at_schema_level(self):
        assert TranscriptRequest().transcript is None
        assert TranscriptRequest(transcript="").transcript == ""

    def test_transcript_must_be_a_string(self):
        with pytest.raises(ValidationError):
            TranscriptRequest(transcript=["not", "text"])

    def test_script_is_optional_at_schema_level(self):
        assert TextToSpeechRequest().script is None
        assert TextToSpeechRequest(script="Speaker 1: Hi").script == "Speaker 1: Hi"

    def test_unknown_fields_are_ignored(self):
        request = TextToSpeechRequest.model_validate({"script": "x", "voice": "other"})
        assert request.model_dump() == {"script": "x"}


class TestResponseModels:

    def test_generation_result_defaults_to_no_segments(self):
        result = GenerationResult(success=True, script="No script generated.")
        assert result.model_dump() == {"success": True, "script": "No script generated.", "segments": []}

    def test_generation_result_serialises_segments(self):
        result = GenerationResult(
            success=True,
            script="**Host**: Hi",
            segments=[Segment(speaker="Host", text="Hi")],
        )
        assert result.model_dump()["segments"] == [{"speaker": "Host", "text": "Hi"}]

    def test_synthesis_result_wire_name(self):
        result = SynthesisResult(success=True, audio_url="/audio/1.mp3")

        assert result.audio_url == "/audio/1.mp3"
        assert result.model_dump(by_alias=True) == {"success": True, "audioUrl": "/audio/1.mp3"}

    def test_synthesis_result_accepts_wire_name(self):
        result = SynthesisResult.model_validate({"success": True, "audioUrl": "/audio/2.mp3"})
        assert result.audio_url == "/audio/2.mp3"

    def test_connection_check_message(self):
        message = ConnectionCheckMessage(message="Backend is connected to frontend!")
        assert message.model_dump() == {"message": "Backend is connected to frontend!"}

    def test_health_status_values(self):
        assert HealthStatus(status="ok").status == "ok"
        with pytest.raises(ValidationError):
            HealthStatus(status="degraded")

    def test_error_response(self):
        error = ErrorResponse(code="INVALID_INPUT", message="Transcript is required")
        assert error.model_dump() == {
            "code": "INVALID_INPUT",
            "message": "Transcript is required",
            "details": None,
        }


class TestErrors:

    @pytest.mark.parametrize("error", [
        InvalidInputError("Transcript is required"),
        UpstreamError("boom", service="generation"),
        StorageError("disk full"),
    ])
    def test_share_a_base_class(self, error):
        assert isinstance(error, PodcastServiceError)

    def test_upstream_error_keeps_diagnostics(self):
        error = UpstreamError("Speech synthesis failed", service="synthesis", status_code=401, body="bad key")

        assert str(error) == "Speech synthesis failed"
        assert error.service == "synthesis"
        assert error.status_code == 401
        assert error.body == "bad key"

    def test_storage_error_keeps_path(self):
        error = StorageError("cannot write", path="/tmp/audio/1.mp3")
        assert error.path == "/tmp/audio/1.mp3"
        assert StorageError("no path").path is None
