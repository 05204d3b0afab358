"""Retrieval of go.mod and go.sum into a local working directory."""

import asyncio
import base64
import os
import re
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

import httpx

from .errors import InvalidReference, RetrievalError
from .models import RepositoryReference, RetrievalResult

MANIFEST_FILENAME = "go.mod"
LOCK_FILENAME = "go.sum"
DEFAULT_API_URL = "https://api.github.com"
RETRIEVAL_STRATEGIES = ("api", "clone")

_GITHUB_URL_RE = re.compile(r"https://github\.com/([^/?#]+)/([^/?#]+)")


def parse_repository_reference(location: str) -> RepositoryReference:
    """Extract owner and repository name from a GitHub URL.

    Args:
        location: Repository URL, e.g. https://github.com/owner/repo

    Returns:
        Parsed RepositoryReference

    Raises:
        InvalidReference: If the location is not a GitHub repository URL
    """
    match = _GITHUB_URL_RE.search(location)
    if not match:
        raise InvalidReference(f"Invalid GitHub repository URL: {location}")

    owner, repo = match.groups()
    repo = repo.removesuffix(".git")
    if not repo:
        raise InvalidReference(f"Invalid GitHub repository URL: {location}")

    return RepositoryReference(owner=owner, repo=repo)


@contextmanager
def working_directory(prefix: str = "repo-") -> Iterator[Path]:
    """Create a temporary working directory, removed on exit."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


class ManifestRetriever(Protocol):
    """Populates a working directory with go.mod and, if possible, go.sum."""

    async def fetch(self, location: str, workdir: Path) -> RetrievalResult: ...


class GitHubContentsRetriever:
    """Fetch go.mod and go.sum through the GitHub contents API."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_API_URL,
        timeout: float | None = None,
    ):
        """Initialize GitHub contents retriever.

        Args:
            token: Optional GitHub token for authenticated requests
            base_url: API root, override for GitHub Enterprise
            timeout: Request timeout in seconds (None waits indefinitely)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    async def fetch(self, location: str, workdir: Path) -> RetrievalResult:
        """Download go.mod and go.sum concurrently into workdir.

        A go.mod failure is fatal; a go.sum failure is recorded as a warning.
        """
        ref = parse_repository_reference(location)

        async with httpx.AsyncClient(
            base_url=self.base_url, headers=self._headers(), timeout=self.timeout
        ) as client:
            manifest, lock = await asyncio.gather(
                self._download(client, ref, MANIFEST_FILENAME, workdir),
                self._download(client, ref, LOCK_FILENAME, workdir),
                return_exceptions=True,
            )

        if isinstance(manifest, BaseException):
            if isinstance(manifest, RetrievalError):
                raise manifest
            raise RetrievalError(f"Error fetching {MANIFEST_FILENAME}: {manifest}") from manifest

        result = RetrievalResult(manifest_path=manifest)
        if isinstance(lock, BaseException):
            result.warnings.append(
                f"{LOCK_FILENAME} not found or could not be fetched: {lock}"
            )
        else:
            result.lock_path = lock
        return result

    async def _download(
        self, client: httpx.AsyncClient, ref: RepositoryReference, filename: str, workdir: Path
    ) -> Path:
        data = await self._fetch_file(client, ref, filename)
        target = workdir / filename
        try:
            target.write_bytes(data)
        except OSError as e:
            target.unlink(missing_ok=True)
            raise RetrievalError(f"Error saving {filename}: {e}") from e
        return target

    async def _fetch_file(
        self, client: httpx.AsyncClient, ref: RepositoryReference, filename: str
    ) -> bytes:
        """Fetch a single file from the contents API.

        Args:
            client: Open HTTP client
            ref: Repository to read from
            filename: Path of the file in the repository

        Returns:
            Decoded file content
        """
        url = f"/repos/{ref.owner}/{ref.repo}/contents/{filename}"

        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise RetrievalError(f"Network error fetching {filename} from {ref}: {e}") from e

        if response.status_code != 200:
            raise RetrievalError(
                f"Failed to fetch {filename} from {ref}: HTTP {response.status_code}"
            )

        try:
            payload = response.json()
            # Files over 1 MB come back without inline content
            if payload.get("encoding") == "none":
                raise RetrievalError(f"{filename} in {ref} is too large for the contents API")
            return base64.b64decode(payload["content"])
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise RetrievalError(f"Malformed response for {filename} from {ref}: {e}") from e


class GitCloneRetriever:
    """Clone the whole repository and use its top-level go.mod and go.sum."""

    def __init__(self, git: str = "git"):
        self.git = git

    async def fetch(self, location: str, workdir: Path) -> RetrievalResult:
        await self._clone(location, workdir)

        manifest = workdir / MANIFEST_FILENAME
        if not manifest.is_file():
            raise RetrievalError(f"{MANIFEST_FILENAME} not found in {location}")

        result = RetrievalResult(manifest_path=manifest)
        lock = workdir / LOCK_FILENAME
        if lock.is_file():
            result.lock_path = lock
        else:
            result.warnings.append(f"{LOCK_FILENAME} not found in {location}")
        return result

    async def _clone(self, location: str, workdir: Path) -> None:
        """Run git clone, raising RetrievalError with its output on failure."""
        cmd = [self.git, "clone", "--", location, str(workdir)]
        env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                env=env,
            )
        except OSError as e:
            raise RetrievalError(f"Cannot run {self.git}: {e}") from e

        output, _ = await proc.communicate()
        if proc.returncode != 0:
            raise RetrievalError(
                f"git clone failed (exit {proc.returncode}): "
                f"{output.decode(errors='replace').strip()}"
            )


def get_retriever(
    strategy: str = "api",
    *,
    token: str | None = None,
    api_url: str = DEFAULT_API_URL,
    git: str = "git",
) -> ManifestRetriever:
    """Build the retriever for a strategy name ('api' or 'clone')."""
    if strategy == "api":
        return GitHubContentsRetriever(token=token, base_url=api_url)
    if strategy == "clone":
        return GitCloneRetriever(git=git)
    raise ValueError(f"Unknown retrieval strategy: {strategy}")
