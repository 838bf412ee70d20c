"""
Clean update for Repo Mirror.

Makes a repository root an exact mirror of the remote branch:

1. Download the remote tree into a fresh staging folder inside the root.
2. Only if every entry downloaded, delete everything in the root except the
   config record, the staging folder, reserved folders and this program.
3. Move the staged snapshot into the root and drop the staging folder.

A failed download leaves the root exactly as it was. A crash between steps 2
and 3 leaves a partially emptied root; the next reconcile recovers from it.
"""

from pathlib import Path
from typing import Optional

from ..config import RepositoryConfig
from ..constants import CONFIG_FILENAME, RESERVED_DIR_NAMES, STAGING_DIR_NAME
from ..errors import FilesystemError
from ..paths import get_program_name
from ..ui import detail
from .downloader import SyncResult, TreeDownloader
from .purger import move_contents, purge_root, remove_path


class Reconciler:
    """Applies remote state to repository roots."""

    def __init__(self, downloader: TreeDownloader, program_name: Optional[str] = None):
        self.downloader = downloader
        self.program_name = program_name if program_name is not None else get_program_name()

    @property
    def client(self):
        return self.downloader.client

    def protected_names(self) -> set[str]:
        """Entry names directly under a root that a clean update never deletes."""
        names = {CONFIG_FILENAME, STAGING_DIR_NAME, *RESERVED_DIR_NAMES}
        if self.program_name:
            names.add(self.program_name)
        return names

    def reconcile(self, root: Path, config: RepositoryConfig) -> SyncResult:
        """
        Clean update: make root's contents equal the remote branch.

        Args:
            root: Repository root (holds the config record)
            config: That root's config

        Returns:
            SyncResult of the download; on failure the root is untouched

        Raises:
            ConfigError: repo/branch missing
            FilesystemError: staging, delete or move failed
        """
        config.validate()
        root = Path(root)
        staging = root / STAGING_DIR_NAME

        # Step 1: fresh staging folder (drop leftovers from an interrupted run)
        remove_path(staging)
        try:
            staging.mkdir()
        except OSError as e:
            raise FilesystemError(f"Could not create {staging}: {e}") from e

        # Step 2: download; failure never touches the root
        url = self.client.contents_url(config)
        result = self.downloader.download(url, staging, config)
        if not result.success:
            remove_path(staging)
            return result

        # Step 3: clear the root
        protected = self.protected_names()
        deleted = purge_root(root, protected)
        for path in deleted:
            detail(f"Removed {path.name}", config.quiet)

        # Step 4: swap the snapshot in; protected names stay local
        move_contents(staging, root, skip=protected)

        # Step 5: drop the staging folder
        remove_path(staging)
        return result

    def pull(self, root: Path, config: RepositoryConfig) -> SyncResult:
        """Download the remote branch over root without deleting anything."""
        config.validate()
        url = self.client.contents_url(config)
        return self.downloader.download(url, Path(root), config)
