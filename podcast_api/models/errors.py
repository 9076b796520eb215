# ABOUTME: This file defines custom exception classes for the podcast generator service.
# ABOUTME: These exceptions map to specific HTTP status codes through the handlers in main.py.

from typing import Optional


class PodcastServiceError(Exception):
    """Base class for every error raised by the service components."""
    pass


class InvalidInputError(PodcastServiceError):
    """Raised when a required input is missing or blank.
    Raised before any filesystem or network work. Maps to HTTP 400 Bad Request.
    """
    pass


class UpstreamError(PodcastServiceError):
    """Raised when a remote AI service fails, times out or answers with
    a non-success status. Maps to HTTP 500.

    ``status_code`` and ``body`` hold the upstream diagnostics; they are
    logged, never returned to the client.
    """

    def __init__(
        self,
        message: str,
        service: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.body = body


class StorageError(PodcastServiceError):
    """Raised when a local directory cannot be created or a file cannot
    be written to completion. Maps to HTTP 500.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
