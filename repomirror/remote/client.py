"""
GitHub contents API client for Repo Mirror.

Handles all HTTP interactions with the remote repository host.
"""

import asyncio
import json
import ssl
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import quote

import aiohttp
import certifi
import requests

from .. import __version__
from ..config import RepositoryConfig
from ..constants import DEFAULT_API_BASE
from ..errors import NetworkError
from ..utils import mask_token


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "dir"


@dataclass
class RemoteEntry:
    """One node of a remote directory listing."""
    name: str
    kind: EntryKind
    path: str
    content_url: str
    download_url: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @classmethod
    def from_dict(cls, data: dict) -> Optional["RemoteEntry"]:
        """Build from a listing item; None for types we don't mirror (symlink, submodule)."""
        try:
            kind = EntryKind(data.get("type"))
        except ValueError:
            return None
        return cls(
            name=data.get("name", ""),
            kind=kind,
            path=data.get("path", ""),
            content_url=data.get("url", ""),
            download_url=data.get("download_url"),
        )


@dataclass
class ClientConfig:
    """Configuration for ContentClient."""
    api_base: str = DEFAULT_API_BASE
    timeout: int = 60
    max_retries: int = 3
    write_timeout: float = 120.0


class ContentClient:
    """
    GitHub contents API client.

    Lists directories and fetches raw files (blocking, with retries), and
    pushes single files with one PUT bounded by a timeout.

    Credentials are passed per call and never kept on the client, so one
    client can serve many repository roots.
    """

    USER_AGENT = f"repomirror/{__version__}"
    ACCEPT = "application/vnd.github.v3+json"

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self._api_calls = 0

    @property
    def api_calls(self) -> int:
        """Total requests made by this client."""
        return self._api_calls

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def contents_url(self, repo_config: RepositoryConfig) -> str:
        """Listing URL for the repository root on the configured branch."""
        base = self.config.api_base.rstrip("/")
        return f"{base}/{repo_config.repo}/contents?ref={quote(repo_config.branch, safe='')}"

    def file_url(self, repo_config: RepositoryConfig, rel_path: str) -> str:
        """Contents URL for a single repository path."""
        base = self.config.api_base.rstrip("/")
        path = quote(rel_path.strip("/"), safe="/")
        return f"{base}/{repo_config.repo}/contents/{path}?ref={quote(repo_config.branch, safe='')}"

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _get_headers(self, credentials: Optional[RepositoryConfig] = None) -> dict:
        headers = {
            "User-Agent": self.USER_AGENT,
            "Accept": self.ACCEPT,
        }
        if credentials is not None and credentials.token:
            headers["Authorization"] = f"token {credentials.token}"
        return headers

    def _request_with_retry(
        self,
        method: str,
        url: str,
        credentials: Optional[RepositoryConfig] = None,
        **kwargs,
    ) -> requests.Response:
        """
        Make a request with retry logic.

        Timeouts, dropped connections and 5xx answers are retried with
        exponential backoff; any other HTTP error fails at once.

        Raises:
            NetworkError: when the request ultimately fails
        """
        timeout = kwargs.pop("timeout", self.config.timeout)
        token = credentials.token if credentials is not None else None
        shown_url = mask_token(url, token)
        attempts = max(1, self.config.max_retries)

        for attempt in range(attempts):
            last_attempt = attempt == attempts - 1
            try:
                response = requests.request(
                    method, url, timeout=timeout,
                    headers=self._get_headers(credentials), **kwargs
                )
                self._api_calls += 1
                response.raise_for_status()
                return response
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                if not last_attempt:
                    time.sleep(2 ** attempt)
                    continue
                raise NetworkError(f"Could not reach {shown_url}: {type(e).__name__}", url=shown_url) from e
            except requests.exceptions.HTTPError as e:
                status = e.response.status_code if e.response is not None else None
                if status is not None and status >= 500 and not last_attempt:
                    time.sleep(2 ** attempt)
                    continue
                raise NetworkError(f"HTTP {status} from {shown_url}", url=shown_url, status=status) from e
            except requests.exceptions.RequestException as e:
                raise NetworkError(f"Request to {shown_url} failed: {e}", url=shown_url) from e

        raise NetworkError(f"Request failed after {attempts} attempts", url=shown_url)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_directory(self, url: str, credentials: Optional[RepositoryConfig] = None) -> list[RemoteEntry]:
        """
        List a remote directory.

        Args:
            url: Contents API URL of the directory
            credentials: Config whose token (if any) authorizes the request

        Returns:
            Entries of the directory (files and subdirectories only)

        Raises:
            NetworkError: unreachable host, error status or malformed listing
        """
        response = self._request_with_retry("GET", url, credentials)
        try:
            items = response.json()
        except ValueError as e:
            raise NetworkError("Directory listing is not JSON", url=url) from e

        if not isinstance(items, list):
            raise NetworkError("Expected a directory listing, got a single item", url=url)

        entries = []
        for item in items:
            if not isinstance(item, dict):
                continue
            entry = RemoteEntry.from_dict(item)
            if entry is not None:
                entries.append(entry)
        return entries

    def fetch_file(self, url: str, credentials: Optional[RepositoryConfig] = None) -> bytes:
        """Fetch raw file bytes from a download URL."""
        response = self._request_with_retry("GET", url, credentials)
        return response.content

    def get_file_info(self, url: str, credentials: Optional[RepositoryConfig] = None) -> Optional[dict]:
        """
        Get metadata for a single repository path.

        Returns:
            Metadata dict (includes "sha"), or None if the path doesn't exist yet
        """
        try:
            response = self._request_with_retry("GET", url, credentials)
        except NetworkError as e:
            if e.status == 404:
                return None
            raise
        try:
            data = response.json()
        except ValueError:
            return None
        return data if isinstance(data, dict) else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def _put_async(self, url: str, body: dict, headers: dict) -> dict:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        connector = aiohttp.TCPConnector(ssl=ssl_context)
        async with aiohttp.ClientSession(connector=connector) as session:
            async with session.put(url, json=body, headers=headers) as response:
                self._api_calls += 1
                text = await response.text()
                if response.status >= 400:
                    raise NetworkError(f"HTTP {response.status} from {url}", url=url, status=response.status)
                if not text:
                    return {"success": True}
                try:
                    return json.loads(text)
                except ValueError:
                    return {"success": True}

    def put_file(self, url: str, body: dict, credentials: Optional[RepositoryConfig] = None) -> dict:
        """
        Create or update one file with a single PUT.

        Blocks until the response for this request arrives or write_timeout
        elapses.

        Raises:
            NetworkError: timeout, transport failure or error status
        """
        headers = self._get_headers(credentials)
        timeout = self.config.write_timeout
        try:
            return asyncio.run(asyncio.wait_for(self._put_async(url, body, headers), timeout=timeout))
        except asyncio.TimeoutError as e:
            raise NetworkError(f"No response from {url} within {timeout:.0f}s", url=url) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {url} failed: {e}", url=url) from e
