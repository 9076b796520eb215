# ABOUTME: Filesystem helpers shared by the upload stager and the speech synthesizer.
# ABOUTME: Timestamp-based file naming, lazy directory creation, and static serving of those directories.

import os
import time
from pathlib import Path
from typing import Union

from fastapi.staticfiles import StaticFiles

from podcast_api.logging_config import get_logger
from podcast_api.models.errors import StorageError

logger = get_logger(__name__)


def timestamped_name(extension: str) -> str:
    """Build ``<epoch-milliseconds><extension>``.

    Two names produced within the same millisecond collide; callers accept
    that rather than relying on it being unique.
    """
    if extension and not extension.startswith("."):
        extension = f".{extension}"
    return f"{int(time.time() * 1000)}{extension}"


def ensure_directory(directory: Union[str, Path]) -> Path:
    """Create ``directory`` (and parents) if absent. Idempotent."""
    path = Path(directory)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"Cannot create directory {path}: {e}", path=str(path)) from e
    return path


class LazyStaticFiles(StaticFiles):
    """StaticFiles over a directory that may not exist yet.

    The upload and audio directories are created on first write, so a
    request arriving before that answers 404 instead of failing the
    directory check with a 500.
    """

    def __init__(self, *, directory: Union[str, Path], **kwargs):
        super().__init__(directory=directory, check_dir=False, **kwargs)

    async def check_config(self) -> None:
        if self.directory is not None and not os.path.isdir(self.directory):
            logger.warning("static_directory_missing", directory=str(self.directory))
            return
        await super().check_config()
