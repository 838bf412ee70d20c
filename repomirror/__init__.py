"""
Repo Mirror - keep local folders in step with a remote GitHub repository.

This package mirrors a repository's files into a local directory using the
GitHub contents API, and can keep one or many such directories updated on a
timer.

Import from submodules directly:
    from repomirror.config import RepositoryConfig
    from repomirror.remote import ContentClient
    from repomirror.sync import Reconciler, SyncDaemon
    from repomirror.operations import clone, update
"""


def _get_version():
    """Version from the VERSION file in a checkout, else from the installed distribution."""
    from importlib.metadata import PackageNotFoundError, version
    from pathlib import Path
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    try:
        return version("repo-mirror")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
