"""
Shared utilities for Repo Mirror.
"""

import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class TeeOutput:
    """Write to both stdout and a log file, stripping colors and progress noise."""

    _ANSI = re.compile(r'\x1b\[[0-9;]*[mKHJ]')

    def __init__(self, log_path: Path):
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self.terminal = sys.stdout
        self.log_file = open(log_path, "a", encoding="utf-8")
        self._line_buffer = ""
        self.log_file.write(f"\n{'='*60}\n")
        self.log_file.write(f"Session started: {datetime.now().isoformat()}\n")
        self.log_file.write(f"{'='*60}\n\n")
        self.log_file.flush()

    def write(self, message):
        self.terminal.write(message)

        self._line_buffer += self._ANSI.sub('', message)

        while '\n' in self._line_buffer:
            line, self._line_buffer = self._line_buffer.split('\n', 1)
            stripped = line.rstrip()
            if stripped and not stripped.startswith('\r'):
                timestamp = datetime.now().strftime("[%Y-%m-%d %H:%M:%S]")
                self.log_file.write(f"{timestamp} {stripped}\n")

        # Only keep the last version of a \r-overwritten line
        if '\r' in self._line_buffer:
            self._line_buffer = self._line_buffer.rsplit('\r', 1)[-1]

        self.log_file.flush()

    def flush(self):
        self.terminal.flush()
        self.log_file.flush()

    def close(self):
        if self._line_buffer.strip():
            timestamp = datetime.now().strftime("[%Y-%m-%d %H:%M:%S]")
            self.log_file.write(f"{timestamp} {self._line_buffer.rstrip()}\n")
        self.log_file.close()


def mask_token(text: str, token: Optional[str]) -> str:
    """Replace every occurrence of token in text with ***."""
    if not text or not token:
        return text
    return text.replace(token, "***")


def is_safe_entry_name(name: str) -> bool:
    """
    Check that a remote entry name is a single, plain path component.

    Rejects empty names, "." and "..", and anything with a path separator,
    so a hostile listing can't write outside the destination folder.
    """
    if not name or name in (".", ".."):
        return False
    if "/" in name or "\\" in name or "\x00" in name:
        return False
    return True


def relative_posix(path: Path, base: Path) -> str:
    """Path of `path` relative to `base`, with forward slashes."""
    return path.relative_to(base).as_posix()


def format_duration(seconds: float) -> str:
    """Format seconds as human readable duration."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{int(seconds // 60)}m {int(seconds % 60)}s"
    else:
        return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"
