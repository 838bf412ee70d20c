"""
User-facing operations for Repo Mirror.

One function per command-line verb. Each takes the directory the command was
run from and either returns its result or raises a MirrorError describing why
it couldn't run.
"""

import base64
from pathlib import Path
from typing import Optional

from .config import RepositoryConfig, config_path
from .constants import CONFIG_FILENAME, DEFAULT_BRANCH
from .errors import ConfigError, FilesystemError
from .remote import ClientConfig, ContentClient, parse_repo_identifier
from .sync import Reconciler, SyncResult, TreeDownloader, find_repository_root, load_repository
from .ui import info
from .utils import relative_posix


def make_reconciler(client_config: Optional[ClientConfig] = None, quiet: bool = False) -> Reconciler:
    """Wire up client, downloader and reconciler."""
    client = ContentClient(client_config)
    return Reconciler(TreeDownloader(client, quiet=quiet))


def set_config(cwd: Path, key: str, value: str) -> tuple[Path, str]:
    """
    Apply `config <key> <value>`.

    Edits the record of the repository containing cwd, or creates one in cwd.

    Returns:
        Tuple of (config_file_path, canonical_key)
    """
    root = find_repository_root(cwd) or Path(cwd)
    if config_path(root).exists():
        config = RepositoryConfig.load(root)
    else:
        config = RepositoryConfig()

    canonical = config.set_value(key, value)
    config.save(root)
    return config_path(root), canonical


def clone(cwd: Path, identifier: str, branch: Optional[str], reconciler: Reconciler) -> SyncResult:
    """
    Make cwd a repository root for identifier and download the branch into it.

    Credentials already recorded in cwd are kept.
    """
    repo, error = parse_repo_identifier(identifier)
    if error:
        raise ConfigError(f"{error}: {identifier!r}")

    root = Path(cwd)
    if config_path(root).exists():
        config = RepositoryConfig.load(root)
    else:
        config = RepositoryConfig()
    config.repo = repo
    config.branch = branch or DEFAULT_BRANCH
    config.validate()
    config.save(root)

    info(f"Cloning {config.repo} ({config.branch})...")
    return reconciler.pull(root, config)


def pull(cwd: Path, reconciler: Reconciler) -> SyncResult:
    """Download the branch over the repository containing cwd (no deletions)."""
    root, config = load_repository(cwd)
    info(f"Pulling from {config.repo} ({config.branch})...")
    return reconciler.pull(root, config)


def update(cwd: Path, reconciler: Reconciler) -> SyncResult:
    """Clean update of the repository containing cwd."""
    root, config = load_repository(cwd)
    info(f"Updating {root} from {config.repo} ({config.branch})...")
    return reconciler.reconcile(root, config)


def push(cwd: Path, file: str, client: ContentClient) -> str:
    """
    Upload one local file to the repository containing cwd.

    Returns:
        The file's path inside the repository

    Raises:
        ConfigError: no token configured
        FilesystemError: file missing or outside the repository
        NetworkError: request failed
    """
    root, config = load_repository(cwd)
    config.validate()
    if not config.token:
        raise ConfigError("No token configured. Run 'config token <token>'")

    path = (Path(cwd) / file).resolve()
    if not path.is_file():
        raise FilesystemError(f"File not found: {file}")
    try:
        rel_path = relative_posix(path, root.resolve())
    except ValueError:
        raise FilesystemError(f"{file} is outside the repository at {root}") from None
    if rel_path == CONFIG_FILENAME:
        raise FilesystemError(f"Refusing to push {CONFIG_FILENAME}")

    try:
        content = path.read_bytes()
    except OSError as e:
        raise FilesystemError(f"Could not read {file}: {e}") from e

    info(f"Pushing {rel_path}...")
    url = client.file_url(config, rel_path)
    body = {
        "message": f"Update {rel_path} via repomirror",
        "content": base64.b64encode(content).decode("ascii"),
        "branch": config.branch,
    }
    existing = client.get_file_info(url, config)
    if existing and existing.get("sha"):
        body["sha"] = existing["sha"]

    client.put_file(url, body, config)
    return rel_path
