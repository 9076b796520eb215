# ABOUTME: This file implements the SpeechSynthesizer that turns a script into an audio file.
# ABOUTME: Streams the ElevenLabs text-to-speech response straight to disk and returns its public URL.

from __future__ import annotations

import time
from pathlib import Path
from typing import Optional, Union

import httpx

from podcast_api.logging_config import get_logger
from podcast_api.models.errors import InvalidInputError, StorageError, UpstreamError
from podcast_api.models.responses import SynthesisResult
from podcast_api.monitoring.metrics import PrometheusMetrics
from podcast_api.utils.files import ensure_directory, timestamped_name
from podcast_api.utils.streaming import copy_stream_to_file

logger = get_logger(__name__)

SERVICE_NAME = "synthesis"

MODEL_ID = "eleven_multilingual_v2"
VOICE_STABILITY = 0.5
VOICE_SIMILARITY_BOOST = 0.75
OUTPUT_EXTENSION = ".mp3"


def _discard(path: Path) -> None:
    """Remove a partially written file so no URL can ever point at it."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("partial_audio_not_removed", path=str(path), error=str(e))


class SpeechSynthesizer:
    """Client for the remote text-to-speech service.

    Audio is written to ``output_dir`` and referenced as
    ``<url_prefix>/<file name>``, which the static file mount resolves.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str,
        voice_id: str,
        output_dir: Union[str, Path],
        url_prefix: str = "/audio",
        base_url: str = "https://api.elevenlabs.io/v1",
    ):
        self._http_client = http_client
        self._api_key = api_key
        self._voice_id = voice_id
        self._output_dir = Path(output_dir)
        self._url_prefix = url_prefix.rstrip("/")
        self._base_url = base_url.rstrip("/")

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/text-to-speech/{self._voice_id}/stream"

    async def synthesize(self, script: Optional[str]) -> SynthesisResult:
        """Convert ``script`` to speech and store it.

        Returns:
            SynthesisResult referencing the completely written file

        Raises:
            InvalidInputError: If the script is missing or blank (no call is made)
            UpstreamError: If the call fails, times out, returns a non-2xx
                status (error body attached) or breaks off mid-stream
            StorageError: If the output directory or file cannot be written
        """
        if script is None or not script.strip():
            raise InvalidInputError("Script is required")

        output_dir = ensure_directory(self._output_dir)
        file_name = timestamped_name(OUTPUT_EXTENSION)
        destination = output_dir / file_name

        body = {
            "text": script,
            "model_id": MODEL_ID,
            "voice_settings": {
                "stability": VOICE_STABILITY,
                "similarity_boost": VOICE_SIMILARITY_BOOST,
            },
        }
        headers = {
            "xi-api-key": self._api_key,
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
        }
        metrics = PrometheusMetrics()

        start = time.monotonic()
        try:
            async with self._http_client.stream("POST", self.endpoint, json=body, headers=headers) as response:
                if response.is_error:
                    error_body = (await response.aread()).decode("utf-8", errors="replace")
                    metrics.record_upstream_call(SERVICE_NAME, "error", time.monotonic() - start)
                    raise UpstreamError(
                        f"Synthesis service returned HTTP {response.status_code}",
                        service=SERVICE_NAME,
                        status_code=response.status_code,
                        body=error_body,
                    )

                try:
                    bytes_written = await copy_stream_to_file(response.aiter_bytes(), destination)
                except OSError as e:
                    _discard(destination)
                    metrics.record_upstream_call(SERVICE_NAME, "error", time.monotonic() - start)
                    raise StorageError(
                        f"Cannot write audio to {destination}: {e}", path=str(destination)
                    ) from e
        except httpx.TimeoutException as e:
            _discard(destination)
            metrics.record_upstream_call(SERVICE_NAME, "timeout", time.monotonic() - start)
            raise UpstreamError(f"Synthesis request timed out: {e}", service=SERVICE_NAME) from e
        except httpx.HTTPError as e:
            _discard(destination)
            metrics.record_upstream_call(SERVICE_NAME, "error", time.monotonic() - start)
            raise UpstreamError(f"Synthesis request failed: {e}", service=SERVICE_NAME) from e

        duration = time.monotonic() - start
        metrics.record_upstream_call(SERVICE_NAME, "success", duration)
        metrics.record_file_written("audio", bytes_written)

        logger.info(
            "speech_synthesized",
            file_name=file_name,
            size_bytes=bytes_written,
            duration_sec=round(duration, 3),
        )
        return SynthesisResult(success=True, audio_url=f"{self._url_prefix}/{file_name}")
