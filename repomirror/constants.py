"""
Shared constants for Repo Mirror.
"""

# Per-root config record (never downloaded over, never deleted)
CONFIG_FILENAME = ".git_config"

# Where a fresh snapshot is staged before it is swapped into the root
STAGING_DIR_NAME = ".git_temp_update"

# Directories the engine never deletes, descends into, or mirrors over
RESERVED_DIR_NAMES = {".git", ".repomirror"}

# App state directory (daemon log lives here)
STATE_DIR_NAME = ".repomirror"

DEFAULT_API_BASE = "https://api.github.com/repos"
DEFAULT_BRANCH = "main"

# Seconds between daemon iterations
DEFAULT_INTERVAL = 300
