"""
Repository discovery for Repo Mirror.

A repository root is any directory holding a .git_config record. Roots are
found either upward (the repository containing a directory) or downward
(every repository under a directory, for the daemon's multi-root mode).
"""

import os
from collections import deque
from pathlib import Path
from typing import Optional

from ..config import RepositoryConfig, config_path
from ..constants import CONFIG_FILENAME, RESERVED_DIR_NAMES, STAGING_DIR_NAME
from ..errors import NotFoundError

# Directories never descended into during discovery
SKIP_DIR_NAMES = {STAGING_DIR_NAME, *RESERVED_DIR_NAMES}


def find_repository_root(start: Path) -> Optional[Path]:
    """
    Walk from start toward the filesystem root looking for a config record.

    Returns:
        The nearest directory holding .git_config, or None
    """
    current = Path(start).resolve()
    for directory in (current, *current.parents):
        if config_path(directory).is_file():
            return directory
    return None


def find_repository_roots(start: Path) -> list[Path]:
    """
    Breadth-first search under start for every directory holding a config record.

    Staging and reserved directories are skipped, symlinks are not followed,
    and each real directory is visited at most once. Directories that can't
    be listed are skipped.

    Returns:
        Repository roots in breadth-first order (start itself first, if it is one)
    """
    start = Path(start).resolve()
    roots = []
    visited: set[str] = set()
    queue = deque([start])

    while queue:
        directory = queue.popleft()
        real = os.path.realpath(directory)
        if real in visited:
            continue
        visited.add(real)

        subdirs = []
        has_config = False
        try:
            with os.scandir(directory) as entries:
                for entry in entries:
                    if entry.name == CONFIG_FILENAME and entry.is_file(follow_symlinks=False):
                        has_config = True
                    elif entry.is_dir(follow_symlinks=False) and entry.name not in SKIP_DIR_NAMES:
                        subdirs.append(entry.name)
        except OSError:
            continue

        if has_config:
            roots.append(directory)
        for name in sorted(subdirs):
            queue.append(directory / name)

    return roots


def load_repository(start: Path) -> tuple[Path, RepositoryConfig]:
    """
    Find the repository containing start and load its config.

    Raises:
        NotFoundError: no .git_config in start or any parent
    """
    root = find_repository_root(start)
    if root is None:
        raise NotFoundError(
            f"Not a repository (or any of the parent directories): {CONFIG_FILENAME} not found"
        )
    return root, RepositoryConfig.load(root)
