"""
Configuration management for Repo Mirror.

Config files:
- <root>/.git_config: per-repository record (repo, branch, credentials)

A RepositoryConfig is always passed explicitly to whatever needs it. There is
no shared process-wide config, so a daemon serving several roots never sends
one root's token with another root's requests.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .constants import CONFIG_FILENAME, DEFAULT_BRANCH
from .errors import ConfigError

# Keys accepted by `config <key> <value>` (and their aliases)
KEY_ALIASES = {
    "user": "username",
    "username": "username",
    "token": "token",
    "repo": "repo",
    "branch": "branch",
    "quiet": "quiet",
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: str) -> bool:
    """Parse a command-line boolean ("true", "off", "1", ...)."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


@dataclass
class RepositoryConfig:
    """Settings for one repository root."""
    repo: Optional[str] = None  # owner/name
    branch: str = DEFAULT_BRANCH
    username: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)
    quiet: bool = False
    # Keys we don't know about, written back untouched
    extra: dict = field(default_factory=dict, repr=False)

    def __repr__(self) -> str:
        token = "***" if self.token else None
        return (
            f"RepositoryConfig(repo={self.repo!r}, branch={self.branch!r}, "
            f"username={self.username!r}, token={token!r}, quiet={self.quiet!r})"
        )

    @property
    def owner(self) -> str:
        return self.repo.split("/", 1)[0] if self.repo else ""

    @property
    def name(self) -> str:
        return self.repo.split("/", 1)[1] if self.repo and "/" in self.repo else ""

    def validate(self):
        """Raise ConfigError unless repo and branch are usable for a sync."""
        if not self.repo:
            raise ConfigError("No repository configured. Run 'config repo <owner>/<name>'")
        if not self.owner or not self.name or self.repo.count("/") != 1:
            raise ConfigError(f"Repository must look like owner/name, got {self.repo!r}")
        if not self.branch:
            raise ConfigError("No branch configured. Run 'config branch <name>'")

    def set_value(self, key: str, value: str) -> str:
        """
        Apply a `config <key> <value>` edit.

        Returns:
            The canonical key name that was set
        """
        canonical = KEY_ALIASES.get(key.lower())
        if canonical is None:
            known = ", ".join(sorted(set(KEY_ALIASES.values())))
            raise ConfigError(f"Unknown config key {key!r} (known: {known})")

        if canonical == "quiet":
            self.quiet = parse_bool(value)
        else:
            setattr(self, canonical, value)
        return canonical

    def to_dict(self) -> dict:
        d = dict(self.extra)
        d.update({
            "username": self.username,
            "token": self.token,
            "repo": self.repo,
            "branch": self.branch,
        })
        if self.quiet:
            d["quiet"] = self.quiet
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "RepositoryConfig":
        known = {"username", "token", "repo", "branch", "quiet"}
        quiet = data.get("quiet", False)
        if isinstance(quiet, str):
            # Hand-edited records may spell booleans as strings
            quiet = parse_bool(quiet)
        return cls(
            repo=data.get("repo"),
            branch=data.get("branch") or DEFAULT_BRANCH,
            username=data.get("username"),
            token=data.get("token"),
            quiet=bool(quiet),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @classmethod
    def load(cls, root: Path) -> "RepositoryConfig":
        """Load the record stored at root/.git_config."""
        path = config_path(root)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"No {CONFIG_FILENAME} in {root}") from None
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Could not read {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"{path} does not hold a key/value record")
        return cls.from_dict(data)

    def save(self, root: Path):
        """Write the record to root/.git_config."""
        with open(config_path(root), "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)


def config_path(root: Path) -> Path:
    return Path(root) / CONFIG_FILENAME
