"""
Line-oriented status output.

Every command ends with exactly one success() or failure() line; detail()
lines are per-file chatter that quiet mode suppresses.
"""

from .colors import Colors


def info(msg: str):
    print(msg)


def detail(msg: str, quiet: bool = False):
    """Per-file progress line (skipped when quiet)."""
    if not quiet:
        print(f"  {Colors.DIM}{msg}{Colors.RESET}")


def success(msg: str):
    print(f"{Colors.GREEN}✓{Colors.RESET} {msg}")


def failure(msg: str):
    print(f"{Colors.RED}✗{Colors.RESET} {msg}")


def print_separator(width: int = 50):
    print(f"{Colors.MUTED}{'─' * width}{Colors.RESET}")


def print_section_header(title: str):
    print()
    print(f"{Colors.BOLD}[{title}]{Colors.RESET}")
