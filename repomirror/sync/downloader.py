"""
Tree downloader for Repo Mirror.

Recursively materializes a remote directory on local disk. Best-effort: one
failed entry is recorded and its siblings are still downloaded.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import RepositoryConfig
from ..constants import CONFIG_FILENAME
from ..errors import NetworkError
from ..remote import ContentClient
from ..ui import detail
from ..utils import is_safe_entry_name


@dataclass
class SyncResult:
    """Outcome of a download or update step."""
    success: bool = True
    failure_reason: Optional[str] = None
    downloaded: int = 0
    failures: list[str] = field(default_factory=list)

    @classmethod
    def failed(cls, reason: str) -> "SyncResult":
        return cls(success=False, failure_reason=reason, failures=[reason])

    def record_failure(self, reason: str):
        self.success = False
        self.failures.append(reason)
        if self.failure_reason is None:
            self.failure_reason = reason
        elif len(self.failures) == 2:
            self.failure_reason = f"{self.failures[0]} (and more)"

    def merge(self, other: "SyncResult"):
        """Fold a sub-tree result into this one."""
        self.downloaded += other.downloaded
        for reason in other.failures:
            self.record_failure(reason)
        if not other.success and not other.failures:
            self.record_failure(other.failure_reason or "unknown failure")


class TreeDownloader:
    """Downloads a remote directory tree into a local folder."""

    def __init__(self, client: ContentClient, quiet: bool = False):
        self.client = client
        self.quiet = quiet

    def download(
        self,
        url: str,
        destination: Path,
        credentials: Optional[RepositoryConfig] = None,
    ) -> SyncResult:
        """
        Mirror the remote directory at `url` into `destination`.

        Existing local files with the same name are overwritten; nothing is
        deleted. The reserved config filename is never written.

        Args:
            url: Contents API URL of the remote directory
            destination: Local folder (created if missing)
            credentials: Config carrying the token for private repositories

        Returns:
            SyncResult; success is False if any entry failed
        """
        quiet = self.quiet or bool(credentials and credentials.quiet)
        result = SyncResult()

        try:
            entries = self.client.list_directory(url, credentials)
        except NetworkError as e:
            result.record_failure(f"Failed to list {e.url or url}: {e}")
            return result

        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            result.record_failure(f"Failed to create {destination}: {e}")
            return result

        for entry in entries:
            if entry.name == CONFIG_FILENAME:
                continue
            if not is_safe_entry_name(entry.name):
                result.record_failure(f"Refusing unsafe entry name {entry.name!r} in {entry.path or url}")
                continue

            target = destination / entry.name
            if entry.is_file:
                self._download_file(entry, target, credentials, quiet, result)
            elif entry.is_dir:
                result.merge(self.download(entry.content_url, target, credentials))

        return result

    def _download_file(self, entry, target: Path, credentials, quiet: bool, result: SyncResult):
        if not entry.download_url:
            result.record_failure(f"No download URL for {entry.path}")
            return

        detail(f"Downloading {entry.path}", quiet)
        try:
            data = self.client.fetch_file(entry.download_url, credentials)
        except NetworkError as e:
            detail(f"Failed to download {entry.path}", quiet)
            result.record_failure(f"Failed to download {entry.path}: {e}")
            return

        try:
            if target.is_dir() and not target.is_symlink():
                raise IsADirectoryError(f"{target} is a directory")
            with open(target, "wb") as f:
                f.write(data)
        except OSError as e:
            result.record_failure(f"Failed to write {target}: {e}")
            return

        result.downloaded += 1
