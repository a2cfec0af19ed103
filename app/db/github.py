import base64
import logging
from typing import List, Optional, Union

import httpx

from app.schemas.github import GitHubFile
from app.settings import Settings, settings

logger = logging.getLogger(__name__)

API_VERSION = "2022-11-28"


class GitHubError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"GitHub API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class NotFound(GitHubError):
    pass


class Conflict(GitHubError):
    """Raised when a write carries a stale or missing sha."""


class GitHubClient:
    """Thin wrapper over the GitHub contents API for a single repository."""

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str = "",
        *,
        branch: Optional[str] = None,
        base_url: str = "https://api.github.com",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.owner = owner
        self.repo = repo
        self.branch = branch
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.http = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings_obj: Settings = settings, **kwargs) -> "GitHubClient":
        return cls(
            settings_obj.GITHUB_OWNER,
            settings_obj.GITHUB_REPO,
            settings_obj.GITHUB_TOKEN,
            branch=settings_obj.GITHUB_BRANCH,
            base_url=settings_obj.GITHUB_API_URL,
            timeout=settings_obj.GITHUB_TIMEOUT,
            **kwargs,
        )

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{path.strip('/')}"

    def _params(self) -> dict:
        return {"ref": self.branch} if self.branch else {}

    def get_content(self, path: str) -> Union[GitHubFile, List[GitHubFile]]:
        """Directory listing for a directory path, file descriptor for a file path."""
        response = self.http.get(self._contents_url(path), params=self._params())
        _raise_for_status(response)
        data = response.json()
        if isinstance(data, list):
            return [GitHubFile(**entry) for entry in data]
        return GitHubFile(**data)

    def get_raw(self, path: str) -> str:
        response = self.http.get(
            self._contents_url(path),
            params=self._params(),
            headers={"Accept": "application/vnd.github.raw+json"},
        )
        _raise_for_status(response)
        return response.text

    def create_or_update_file(
        self,
        path: str,
        content: str,
        message: str,
        sha: Optional[str] = None,
    ) -> dict:
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if sha:
            payload["sha"] = sha
        if self.branch:
            payload["branch"] = self.branch

        response = self.http.put(self._contents_url(path), json=payload)
        _raise_for_status(response)
        logger.info(f"Committed {path} ({'update' if sha else 'create'})")
        return response.json()

    def close(self):
        self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


def _raise_for_status(response: httpx.Response) -> None:
    if response.is_success:
        return
    try:
        message = response.json().get("message", response.text)
    except (ValueError, AttributeError):
        message = response.text
    if response.status_code == 404:
        raise NotFound(404, message)
    if response.status_code in (409, 422):
        raise Conflict(response.status_code, message)
    raise GitHubError(response.status_code, message)


def get_github():
    """
    Create a GitHub contents client for the configured repository.
    Called at runtime to avoid import-time connections.
    """
    client = GitHubClient.from_settings(settings)
    try:
        yield client
    finally:
        client.close()
