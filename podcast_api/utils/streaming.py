# ABOUTME: This file provides the bounded-memory copy of a streamed HTTP body into a file.
# ABOUTME: Writes go through aiofiles so disk I/O never runs on the event loop thread.

from pathlib import Path
from typing import AsyncIterator

import aiofiles

from podcast_api.logging_config import get_logger

logger = get_logger(__name__)


async def copy_stream_to_file(chunks: AsyncIterator[bytes], destination: Path) -> int:
    """Write every chunk of ``chunks`` to ``destination``.

    Only one chunk is held in memory at a time. The file is created fresh
    (``wb``); if iteration or a write fails the handle is still closed and
    the exception propagates, leaving a partial file behind.

    Args:
        chunks: Async iterator of body chunks (e.g. ``response.aiter_bytes()``)
        destination: File to create

    Returns:
        Number of bytes written
    """
    bytes_written = 0
    async with aiofiles.open(destination, "wb") as out:
        async for chunk in chunks:
            if not chunk:
                continue
            await out.write(chunk)
            bytes_written += len(chunk)
        await out.flush()

    logger.debug("stream_copied", destination=str(destination), size_bytes=bytes_written)
    return bytes_written
