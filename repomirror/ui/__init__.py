"""
Terminal output for Repo Mirror.
"""

from .colors import Colors
from .output import detail, failure, info, print_section_header, print_separator, success

__all__ = [
    "Colors",
    "detail",
    "failure",
    "info",
    "print_section_header",
    "print_separator",
    "success",
]
