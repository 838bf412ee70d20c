"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from repomirror.config import RepositoryConfig
from repomirror.errors import NetworkError
from repomirror.remote import EntryKind, RemoteEntry

DIR_PREFIX = "fake://dir/"
RAW_PREFIX = "fake://raw/"


class FakeRemote:
    """
    In-memory stand-in for ContentClient.

    `files` maps repository paths ("lib/b.txt") to contents. Directories are
    implied by the paths. Failures can be injected per path.
    """

    def __init__(self, files: dict[str, bytes]):
        self.files = dict(files)
        self.unreachable = False
        self.fail_list: set[str] = set()
        self.fail_fetch: set[str] = set()
        self.extra_entries: dict[str, list[RemoteEntry]] = {}
        self.requests: list[tuple[str, object]] = []

    def contents_url(self, config: RepositoryConfig) -> str:
        return f"fake://{config.repo}/contents?ref={config.branch}"

    def file_url(self, config: RepositoryConfig, rel_path: str) -> str:
        return f"fake://{config.repo}/contents/{rel_path}?ref={config.branch}"

    def list_directory(self, url: str, credentials=None) -> list[RemoteEntry]:
        self.requests.append((url, credentials))
        path = url[len(DIR_PREFIX):] if url.startswith(DIR_PREFIX) else ""
        if self.unreachable or path in self.fail_list:
            raise NetworkError("simulated unreachable host", url=url)

        prefix = f"{path}/" if path else ""
        children: dict[str, EntryKind] = {}
        for file_path in self.files:
            if not file_path.startswith(prefix):
                continue
            head, sep, _ = file_path[len(prefix):].partition("/")
            children[head] = EntryKind.DIRECTORY if sep else EntryKind.FILE

        entries = []
        for name, kind in sorted(children.items()):
            full = prefix + name
            entries.append(RemoteEntry(
                name=name,
                kind=kind,
                path=full,
                content_url=DIR_PREFIX + full,
                download_url=RAW_PREFIX + full if kind is EntryKind.FILE else None,
            ))
        entries.extend(self.extra_entries.get(path, []))
        return entries

    def fetch_file(self, url: str, credentials=None) -> bytes:
        self.requests.append((url, credentials))
        path = url[len(RAW_PREFIX):]
        if self.unreachable or path in self.fail_fetch:
            raise NetworkError("simulated download failure", url=url)
        return self.files[path]


def snapshot(root: Path) -> dict[str, bytes]:
    """Every file under root (relative posix path -> bytes), plus directories as None."""
    result = {}
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        result[rel] = path.read_bytes() if path.is_file() else None
    return result


@pytest.fixture
def remote() -> FakeRemote:
    """The example remote: a.txt and lib/b.txt."""
    return FakeRemote({"a.txt": b"hello", "lib/b.txt": b"world"})


@pytest.fixture
def repo_config() -> RepositoryConfig:
    return RepositoryConfig(repo="octo/example", branch="main")


@pytest.fixture
def repo_root(tmp_path: Path, repo_config: RepositoryConfig) -> Path:
    """A repository root with a config record and some stale local state."""
    root = tmp_path / "repo"
    root.mkdir()
    repo_config.save(root)
    (root / "a.txt").write_bytes(b"old")
    (root / "stale.txt").write_bytes(b"junk")
    return root
