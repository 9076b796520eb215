# ABOUTME: Placeholder audio-to-text step for staged uploads.
# ABOUTME: Speech recognition is out of scope; every staged file yields the same constant transcript.

from podcast_api.core.upload_stager import FileHandle
from podcast_api.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER_TRANSCRIPT = (
    "This is a placeholder transcript generated from the uploaded audio file. "
    "Speech recognition is not enabled on this server."
)


def transcribe(handle: FileHandle) -> str:
    """Return the transcript for a staged audio file (always the placeholder)."""
    logger.info("transcription_stubbed", stored_name=handle.stored_name)
    return PLACEHOLDER_TRANSCRIPT
