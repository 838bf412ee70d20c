"""
Path helpers for Repo Mirror.
"""

import sys
from pathlib import Path

from .constants import STATE_DIR_NAME


def get_program_path() -> Path:
    """Get the path of the running program (script or frozen executable)."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable)
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0])
    return Path(__file__)


def get_program_name() -> str:
    """File name of the running program, protected from clean updates."""
    return get_program_path().name


def get_daemon_log_path(base_dir: Path) -> Path:
    """Log file the daemon tees its output to, in base_dir/.repomirror."""
    return Path(base_dir) / STATE_DIR_NAME / "daemon.log"
