"""
github.py - GitHub REST API client for action releases

This module looks up the latest release of an action repository and the
commit SHA a release tag points to.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 10


class GitHubAPIError(Exception):
    """Raised when the GitHub API cannot be reached or answers with an error"""

    def __init__(self, message: str, status: int = 0, url: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        if self.url:
            return f"{self.message} ({self.url})"
        return self.message


@dataclass(frozen=True)
class Release:
    """Latest published release of a repository"""

    tag: str
    target_commitish: str = ""


class GitHubClient:
    """Minimal client for the release and git refs endpoints"""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the client

        Args:
            token: GitHub token, or None for unauthenticated requests
            api_url: Base URL of the REST API
            timeout: Timeout in seconds for each request
            session: Session to send requests with (a new one by default)
        """
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            }
        )
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            logger.debug("No GitHub token configured, API requests are unauthenticated")

    def _get(self, path: str) -> Optional[Dict[str, Any]]:
        """GET a JSON object; None on 404, GitHubAPIError on anything else that fails"""
        url = f"{self.api_url}{path}"
        logger.debug("GET %s", url)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise GitHubAPIError(f"Request failed: {e}", url=url) from e

        if response.status_code == 404:
            return None

        if response.status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            raise GitHubAPIError("API rate limit exceeded", status=403, url=url)

        if response.status_code >= 400:
            message = response.reason or "request failed"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = str(body["message"])
            raise GitHubAPIError(message, status=response.status_code, url=url)

        try:
            data = response.json()
        except ValueError as e:
            raise GitHubAPIError("Invalid JSON in response", status=response.status_code, url=url) from e

        if not isinstance(data, dict):
            raise GitHubAPIError("Unexpected response shape", status=response.status_code, url=url)

        return data

    def get_latest_release(self, owner: str, repo: str) -> Optional[Release]:
        """
        Get the latest release of a repository

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            The release, or None if the repository has no releases

        Raises:
            GitHubAPIError: If the request fails
        """
        data = self._get(f"/repos/{owner}/{repo}/releases/latest")
        if not data or not data.get("tag_name"):
            logger.debug("No release found for %s/%s", owner, repo)
            return None

        return Release(
            tag=str(data["tag_name"]),
            target_commitish=str(data.get("target_commitish") or ""),
        )

    def get_tag_sha(self, owner: str, repo: str, tag: str) -> Optional[str]:
        """
        Get the commit SHA a tag points to

        Annotated tags point at a tag object; it is dereferenced to the
        tagged commit.

        Args:
            owner: Repository owner
            repo: Repository name
            tag: Tag name (e.g., "v4.2.2")

        Returns:
            Commit SHA, or None if the tag does not exist

        Raises:
            GitHubAPIError: If the request fails
        """
        data = self._get(f"/repos/{owner}/{repo}/git/ref/tags/{tag}")
        if not data:
            return None

        obj = data.get("object") or {}
        sha = obj.get("sha")
        if obj.get("type") == "tag" and sha:
            # The ref points at the tag object, not at the tagged commit
            tag_object = self._get(f"/repos/{owner}/{repo}/git/tags/{sha}")
            if not tag_object:
                logger.debug("Tag object %s of %s/%s@%s not found", sha, owner, repo, tag)
                return None
            sha = (tag_object.get("object") or {}).get("sha")

        return str(sha) if sha else None
