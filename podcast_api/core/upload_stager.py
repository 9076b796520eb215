# ABOUTME: This file persists uploaded files to the scratch directory under timestamp-based names.
# ABOUTME: Returns a FileHandle for downstream steps; staged files are never deleted by the service.

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from podcast_api.logging_config import get_logger
from podcast_api.models.errors import StorageError
from podcast_api.monitoring.metrics import PrometheusMetrics
from podcast_api.utils.files import ensure_directory, timestamped_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileHandle:
    """A staged file."""
    stored_name: str
    stored_path: str


class UploadStager:
    """Writes incoming uploads into the scratch directory.

    The directory is created on first use. Stored names are
    ``<epoch-ms><original-extension>``, so two uploads staged in the same
    millisecond get the same name; that is a known limitation.
    """

    def __init__(self, directory: Union[str, Path]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    async def stage(self, data: bytes, original_filename: str) -> FileHandle:
        """Persist ``data`` and return its handle.

        Raises:
            StorageError: If the directory cannot be created or the file written
        """
        directory = ensure_directory(self._directory)
        extension = os.path.splitext(original_filename or "")[1]
        stored_name = timestamped_name(extension)
        stored_path = directory / stored_name

        # Blocking write runs off the event loop
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, stored_path.write_bytes, data)
        except OSError as e:
            logger.error("upload_stage_failed", path=str(stored_path), error=str(e))
            raise StorageError(f"Cannot write upload to {stored_path}: {e}", path=str(stored_path)) from e

        PrometheusMetrics().record_file_written("upload", len(data))
        logger.info(
            "upload_staged",
            original_filename=original_filename,
            stored_name=stored_name,
            size_bytes=len(data),
        )
        return FileHandle(stored_name=stored_name, stored_path=str(stored_path))
