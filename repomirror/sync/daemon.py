"""
Background update loop for Repo Mirror.

Each iteration rediscovers repository roots (they may come and go between
iterations), runs a clean update on each one in turn, then sleeps for the
configured interval. One root's failure never stops the other roots, and one
iteration's failure never stops the loop. The loop only ends with the
process.

Runs on a single thread: no two updates ever overlap, so nothing else in the
process touches a root while its update runs. A hung remote stalls the loop
until the request timeout fires.
"""

import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Union

from ..config import RepositoryConfig
from ..constants import DEFAULT_INTERVAL
from ..paths import get_daemon_log_path
from ..ui import Colors, failure, info, print_section_header, print_separator, success
from ..utils import format_duration
from .downloader import SyncResult
from .locator import find_repository_root, find_repository_roots
from .reconciler import Reconciler

RootOutcome = Union[SyncResult, Exception]


def daemon_log_path(start_dir: Path, scan_all: bool = False) -> Path:
    """
    Where the daemon started from start_dir writes its log.

    In single-root mode the log lives under the enclosing repository root,
    whose .repomirror folder a clean update never deletes. A log under a
    subdirectory of the root would be purged with it.
    """
    base = Path(start_dir)
    if not scan_all:
        base = find_repository_root(base) or base
    return get_daemon_log_path(base)


class SyncDaemon:
    """Runs clean updates on one or many repository roots on a timer."""

    def __init__(
        self,
        start_dir: Path,
        reconciler: Reconciler,
        interval: int = DEFAULT_INTERVAL,
        scan_all: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            start_dir: Where discovery starts
            reconciler: Performs each root's update
            interval: Seconds to sleep between iterations
            scan_all: Update every repository under start_dir instead of the
                one containing it
            sleep: Suspension function (swapped out in tests)
        """
        self.start_dir = Path(start_dir)
        self.reconciler = reconciler
        self.interval = interval
        self.scan_all = scan_all
        self._sleep = sleep
        self.iterations = 0

    @property
    def log_path(self) -> Path:
        return daemon_log_path(self.start_dir, self.scan_all)

    def discover_roots(self) -> list[Path]:
        """Repository roots to update this iteration."""
        if self.scan_all:
            return find_repository_roots(self.start_dir)
        root = find_repository_root(self.start_dir)
        return [root] if root is not None else []

    def update_root(self, root: Path) -> SyncResult:
        """Load one root's config and clean-update it."""
        config = RepositoryConfig.load(root)
        return self.reconciler.reconcile(root, config)

    def run_once(self) -> dict[Path, RootOutcome]:
        """
        One scan-and-update pass.

        Returns:
            Outcome per root: the SyncResult, or the exception that root raised
        """
        self.iterations += 1
        started = time.time()
        stamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        roots = self.discover_roots()
        info(f"{Colors.DIM}[{stamp}] Iteration {self.iterations}: {len(roots)} repositor{'y' if len(roots) == 1 else 'ies'}{Colors.RESET}")

        outcomes: dict[Path, RootOutcome] = {}
        for root in roots:
            print_section_header(str(root))
            try:
                result = self.update_root(root)
            except Exception as e:
                outcomes[root] = e
                failure(f"Update failed: {type(e).__name__}: {e}")
                continue

            outcomes[root] = result
            if result.success:
                success(f"Updated ({result.downloaded} files)")
            else:
                failure(f"Update failed: {result.failure_reason}")

        info(f"{Colors.DIM}Pass finished in {format_duration(time.time() - started)}{Colors.RESET}")
        return outcomes

    def run(self):
        """Update forever. Returns only if the process is interrupted."""
        info(f"Daemon started in {self.start_dir} (every {self.interval}s)")
        print_separator()
        while True:
            try:
                self.run_once()
            except Exception as e:
                failure(f"Iteration {self.iterations} failed: {type(e).__name__}: {e}")
            self._sleep(self.interval)
