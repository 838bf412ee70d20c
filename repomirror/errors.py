"""
Error types for Repo Mirror.
"""

from typing import Optional


class MirrorError(Exception):
    """Base class for every failure the tool reports to the user."""


class NetworkError(MirrorError):
    """Remote unreachable, timed out, or answered with a non-success status."""

    def __init__(self, message: str, url: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status


class NotFoundError(MirrorError):
    """No config record where one was required."""


class FilesystemError(MirrorError):
    """Create, delete or move failed on the local tree."""


class ConfigError(MirrorError):
    """Config record is missing a required field or has a bad value."""
