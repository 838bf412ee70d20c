"""
Remote repository interaction module.

Handles the contents API client and repository identifiers.
"""

from .client import ClientConfig, ContentClient, EntryKind, RemoteEntry
from .utils import parse_repo_identifier

__all__ = [
    "ClientConfig",
    "ContentClient",
    "EntryKind",
    "RemoteEntry",
    "parse_repo_identifier",
]
