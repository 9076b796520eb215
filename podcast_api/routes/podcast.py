# ABOUTME: Podcast generation API routes
# ABOUTME: Implements transcript-to-script, upload-to-script, and script-to-speech endpoints
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from podcast_api.core.script_generator import ScriptGenerator
from podcast_api.core.speech_synthesizer import SpeechSynthesizer
from podcast_api.core.transcription import transcribe
from podcast_api.core.upload_stager import UploadStager
from podcast_api.dependencies import (
    get_script_generator,
    get_speech_synthesizer,
    get_upload_stager,
)
from podcast_api.logging_config import get_logger
from podcast_api.models.errors import InvalidInputError
from podcast_api.models.requests import TranscriptRequest, TextToSpeechRequest
from podcast_api.models.responses import GenerationResult, SynthesisResult

logger = get_logger(__name__)

router = APIRouter()


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@router.post("/generate-from-transcript", response_model=GenerationResult)
async def generate_from_transcript(
    body: TranscriptRequest,
    generator: ScriptGenerator = Depends(get_script_generator),
):
    """
    Generate a podcast script from a transcript.

    Returns the raw script and the speaker segments parsed from it.
    """
    if _is_blank(body.transcript):
        raise InvalidInputError("Transcript is required")

    return await generator.generate(body.transcript)


@router.post("/generate-podcast", response_model=GenerationResult)
async def generate_podcast(
    audio: Optional[UploadFile] = File(None),
    transcript: Optional[str] = Form(None),
    stager: UploadStager = Depends(get_upload_stager),
    generator: ScriptGenerator = Depends(get_script_generator),
):
    """
    Generate a podcast script from an uploaded audio file and/or a transcript.

    The audio file, when present, is staged to the uploads directory. A
    non-blank transcript field takes precedence; otherwise the staged file
    is transcribed (placeholder transcription).
    """
    has_file = audio is not None and bool(audio.filename)
    if not has_file and _is_blank(transcript):
        raise InvalidInputError("Transcript or audio file is required")

    handle = None
    if has_file:
        data = await audio.read()
        handle = await stager.stage(data, audio.filename)

    if _is_blank(transcript):
        transcript = transcribe(handle)

    logger.info(
        "podcast_generation_requested",
        staged_file=handle.stored_name if handle else None,
        transcript_chars=len(transcript),
    )
    return await generator.generate(transcript)


@router.post("/text-to-speech", response_model=SynthesisResult)
async def text_to_speech(
    body: TextToSpeechRequest,
    synthesizer: SpeechSynthesizer = Depends(get_speech_synthesizer),
):
    """
    Convert a script to speech.

    Returns a URL under the audio static mount once the file is completely written.
    """
    if _is_blank(body.script):
        raise InvalidInputError("Script is required")

    return await synthesizer.synthesize(body.script)
