"""
Sync operations module.

Handles tree downloads, clean updates, repository discovery and the
background update loop.
"""

from .downloader import SyncResult, TreeDownloader
from .purger import move_contents, purge_root, remove_path
from .reconciler import Reconciler
from .locator import find_repository_root, find_repository_roots, load_repository
from .daemon import SyncDaemon, daemon_log_path

__all__ = [
    # Downloader
    "SyncResult",
    "TreeDownloader",
    # Purger
    "move_contents",
    "purge_root",
    "remove_path",
    # Clean update
    "Reconciler",
    # Discovery
    "find_repository_root",
    "find_repository_roots",
    "load_repository",
    # Daemon
    "SyncDaemon",
    "daemon_log_path",
]
