"""
Repository identifier utilities for Repo Mirror.
"""

import re

# GitHub owner/repo names: letters, digits, "-", "_" and "."
_NAME = r"[A-Za-z0-9_.-]+"


def parse_repo_identifier(value: str) -> tuple[str | None, str | None]:
    """
    Extract an owner/name identifier from user input.

    Supports formats:
    - owner/name
    - https://github.com/owner/name
    - https://github.com/owner/name.git
    - git@github.com:owner/name.git

    Args:
        value: Identifier or URL string

    Returns:
        Tuple of (identifier, error_message)
        - ("owner/name", None) if valid
        - (None, error_message) if invalid
    """
    value = value.strip()

    url_pattern = rf"github\.com[/:]({_NAME})/({_NAME}?)(?:\.git)?/?$"
    match = re.search(url_pattern, value)
    if match:
        return f"{match.group(1)}/{match.group(2)}", None

    if "github.com" in value:
        return None, "Unrecognized GitHub URL format"

    match = re.match(rf"^({_NAME})/({_NAME})$", value)
    if match:
        owner, name = match.groups()
        if owner in (".", "..") or name in (".", ".."):
            return None, "Not an owner/name identifier"
        return value, None

    return None, "Expected owner/name"
