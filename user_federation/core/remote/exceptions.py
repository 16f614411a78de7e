"""Remote directory exceptions for error handling."""
from __future__ import annotations
from typing import Optional


class RemoteDirectoryError(Exception):
    """Base exception for all remote directory operations."""
    pass


class DirectoryConfigError(RemoteDirectoryError, ValueError):
    """Client configuration is unusable (bad base URL, missing endpoint)."""
    pass


class EntityDecodeError(RemoteDirectoryError, ValueError):
    """Response body does not match the documented wire shape."""
    pass


class UserSearchError(RemoteDirectoryError):
    """Search request failed.

    Unlike find/count/verify, search failures are surfaced to the caller.

    Attributes:
        url: Search endpoint that failed
        status_code: HTTP status code, or None for transport/decode failures
        message: Error description
    """

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        self.url = url
        self.message = message
        self.status_code = status_code
        prefix = f"[{status_code}] " if status_code is not None else ""
        super().__init__(f"{prefix}{url}: {message}")
