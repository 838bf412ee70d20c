"""
File deletion and moving for Repo Mirror.

Handles clearing a repository root and swapping a staged snapshot into it.
"""

import shutil
from pathlib import Path
from typing import Iterable

from ..errors import FilesystemError


def remove_path(path: Path):
    """Delete a file, symlink or directory tree. Missing paths are fine."""
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        raise FilesystemError(f"Could not delete {path}: {e}") from e


def purge_root(root: Path, keep: Iterable[str]) -> list[Path]:
    """
    Delete every entry directly under root except those named in keep.

    Args:
        root: Repository root
        keep: Entry names that survive (config record, staging dir, ...)

    Returns:
        Paths that were deleted
    """
    keep = set(keep)
    deleted = []
    try:
        entries = sorted(root.iterdir())
    except OSError as e:
        raise FilesystemError(f"Could not list {root}: {e}") from e

    for entry in entries:
        if entry.name in keep:
            continue
        remove_path(entry)
        deleted.append(entry)
    return deleted


def move_contents(source: Path, destination: Path, skip: Iterable[str] = ()) -> int:
    """
    Move every top-level item of source into destination.

    A same-named item already in destination is replaced. Items named in
    skip stay behind in source.

    Returns number of items moved.
    """
    moved = 0
    try:
        items = sorted(source.iterdir())
    except OSError as e:
        raise FilesystemError(f"Could not list {source}: {e}") from e

    skip = set(skip)
    for item in items:
        if item.name in skip:
            continue
        dest = destination / item.name
        if dest.exists() or dest.is_symlink():
            remove_path(dest)
        try:
            shutil.move(str(item), str(dest))
        except OSError as e:
            raise FilesystemError(f"Could not move {item} to {dest}: {e}") from e
        moved += 1
    return moved
