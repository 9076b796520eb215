# ABOUTME: This file defines Pydantic models for API request payloads.
# ABOUTME: Required fields are optional at the schema level so that missing input maps to 400, not 422.

from typing import Optional
from pydantic import BaseModel


class TranscriptRequest(BaseModel):
    transcript: Optional[str] = None


class TextToSpeechRequest(BaseModel):
    script: Optional[str] = None
