# FILE: backend/bizpage/editor/errors.py
# PHOENIX PROTOCOL - EDITOR ERROR KINDS
# 1. Every editor operation boundary catches EditorError and turns it into a notification.

from typing import Optional

class EditorError(Exception):
    """Base class for failures surfaced to the profile owner."""

class ValidationError(EditorError):
    """A local precondition failed; no request was sent."""

class RemoteError(EditorError):
    """The API or storage backend answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"

class ProfileNotFoundError(RemoteError):
    """The slug is unknown or the listing has expired."""

class NetworkError(EditorError):
    """The request never completed (DNS, connect, timeout...)."""
