# ABOUTME: Dependency injection functions for FastAPI
# ABOUTME: Hands route handlers the service objects constructed in the application lifespan
from fastapi import Request

from podcast_api.core.script_generator import ScriptGenerator
from podcast_api.core.speech_synthesizer import SpeechSynthesizer
from podcast_api.core.upload_stager import UploadStager


def get_script_generator(request: Request) -> ScriptGenerator:
    """Dependency injection function for ScriptGenerator"""
    return request.app.state.script_generator


def get_speech_synthesizer(request: Request) -> SpeechSynthesizer:
    """Dependency injection function for SpeechSynthesizer"""
    return request.app.state.speech_synthesizer


def get_upload_stager(request: Request) -> UploadStager:
    """Dependency injection function for UploadStager"""
    return request.app.state.upload_stager
