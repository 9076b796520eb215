# ABOUTME: Liveness and frontend connectivity routes
# ABOUTME: Implements GET / (plain text) and GET /test (JSON message)
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from podcast_api.models.responses import ConnectionCheckMessage

router = APIRouter()

LIVENESS_TEXT = "AI Podcast Generator Backend is running!"
CONNECTION_MESSAGE = "Backend is connected to frontend!"


@router.get("/", response_class=PlainTextResponse)
async def root():
    """Plain-text liveness string"""
    return LIVENESS_TEXT


@router.get("/test", response_model=ConnectionCheckMessage)
async def connection_test():
    """Lets the frontend confirm it can reach the backend"""
    return ConnectionCheckMessage(message=CONNECTION_MESSAGE)
