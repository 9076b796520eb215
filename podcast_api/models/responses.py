# ABOUTME: This file defines Pydantic models for API response payloads.
# ABOUTME: These models ensure consistent response structure for generation, synthesis and errors.

from typing import List, Optional, Literal, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


class Segment(BaseModel):
    """One attributed line of dialogue."""
    speaker: str
    text: str


class GenerationResult(BaseModel):
    success: bool
    script: str
    segments: List[Segment] = Field(default_factory=list)


class SynthesisResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    audio_url: str = Field(alias="audioUrl")


class ConnectionCheckMessage(BaseModel):
    message: str


class HealthStatus(BaseModel):
    status: Literal['ok', 'error']


class ReadinessStatus(BaseModel):
    ready: bool
    generation_configured: bool
    synthesis_configured: bool
    generation_model: str
    uploads_dir: str
    audio_dir: str


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[Dict[str, Any]] = None
