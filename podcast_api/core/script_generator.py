# ABOUTME: This file implements the ScriptGenerator that turns a transcript into a podcast script.
# ABOUTME: Issues one Gemini generateContent call with fixed decoding parameters and segments the result.

from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from podcast_api.core.segment_parser import parse_segments
from podcast_api.logging_config import get_logger
from podcast_api.models.errors import InvalidInputError, UpstreamError
from podcast_api.models.responses import GenerationResult
from podcast_api.monitoring.metrics import PrometheusMetrics

logger = get_logger(__name__)

SERVICE_NAME = "generation"

PLACEHOLDER_SCRIPT = "No script generated."

PROMPT_TEMPLATE = """You are a podcast script writer.
Turn the transcript below into an engaging, natural-sounding podcast conversation between two hosts.

Rules:
- Write one line per turn.
- Format every line exactly as **Speaker Name**: what they say
- Keep the facts of the transcript; do not invent new ones.
- Open with a short introduction and close with a short sign-off.

Transcript:
{transcript}
"""

# Bound cost, latency and output length. Not overridable per request.
TEMPERATURE = 0.9
TOP_P = 1.0
TOP_K = 1
MAX_OUTPUT_TOKENS = 2048

GENERATION_CONFIG = {
    "temperature": TEMPERATURE,
    "topP": TOP_P,
    "topK": TOP_K,
    "maxOutputTokens": MAX_OUTPUT_TOKENS,
}


def build_prompt(transcript: str) -> str:
    """Embed the transcript verbatim into the fixed prompt template."""
    return PROMPT_TEMPLATE.format(transcript=transcript)


def extract_script(payload: Any) -> Optional[str]:
    """Return ``candidates[0].content.parts[0].text`` or None if any level is missing."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class ScriptGenerator:
    """Client for the remote text-generation service.

    The HTTP client is injected so tests can substitute a transport and the
    application can share one connection pool across requests.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        model: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
    ):
        self._http_client = http_client
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def generate(self, transcript: Optional[str]) -> GenerationResult:
        """Generate a podcast script for ``transcript``.

        Returns:
            GenerationResult with the raw completion text and its segments

        Raises:
            InvalidInputError: If the transcript is missing or blank (no call is made)
            UpstreamError: If the call fails, times out, returns a non-2xx
                status or a body that is not JSON
        """
        if transcript is None or not transcript.strip():
            raise InvalidInputError("Transcript is required")

        payload = await self._request_completion(build_prompt(transcript))

        script = extract_script(payload)
        if script is None:
            logger.warning("generation_response_incomplete", model=self._model)
            PrometheusMetrics().record_error("IncompleteGenerationResponse", SERVICE_NAME)
            script = PLACEHOLDER_SCRIPT

        segments = parse_segments(script)
        logger.info(
            "script_generated",
            model=self._model,
            script_chars=len(script),
            segment_count=len(segments),
        )
        return GenerationResult(success=True, script=script, segments=segments)

    async def _request_completion(self, prompt: str) -> Any:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        metrics = PrometheusMetrics()

        start = time.monotonic()
        try:
            response = await self._http_client.post(self.endpoint, json=body, headers=headers)
        except httpx.TimeoutException as e:
            metrics.record_upstream_call(SERVICE_NAME, "timeout", time.monotonic() - start)
            raise UpstreamError(f"Generation request timed out: {e}", service=SERVICE_NAME) from e
        except httpx.HTTPError as e:
            metrics.record_upstream_call(SERVICE_NAME, "error", time.monotonic() - start)
            raise UpstreamError(f"Generation request failed: {e}", service=SERVICE_NAME) from e
        duration = time.monotonic() - start

        if response.is_error:
            metrics.record_upstream_call(SERVICE_NAME, "error", duration)
            raise UpstreamError(
                f"Generation service returned HTTP {response.status_code}",
                service=SERVICE_NAME,
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            metrics.record_upstream_call(SERVICE_NAME, "error", duration)
            raise UpstreamError(
                "Generation service returned a non-JSON body",
                service=SERVICE_NAME,
                status_code=response.status_code,
                body=response.text,
            ) from e

        metrics.record_upstream_call(SERVICE_NAME, "success", duration)
        logger.debug("generation_call_completed", duration_sec=round(duration, 3))
        return payload
