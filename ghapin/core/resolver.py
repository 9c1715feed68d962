"""
resolver.py - Release resolution for action references

The resolver answers "what should this action ref become?" for an action
repository and the version a workflow currently uses. Answers come from the
shared ReleaseCache when possible; otherwise the latest release and the
commit SHA of its tag are fetched through the release client and cached.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..utils.version import extract_major_version, is_major_constraint
from .cache import ReleaseCache, ReleaseInfo
from .github import GitHubAPIError, Release
from .reference import ActionIdentity

logger = logging.getLogger(__name__)


class ReleaseClient(Protocol):
    """Lookups the resolver needs from the source hosting API"""

    def get_latest_release(self, owner: str, repo: str) -> Optional[Release]: ...

    def get_tag_sha(self, owner: str, repo: str, tag: str) -> Optional[str]: ...


class ReleaseLookupError(Exception):
    """Raised when the release of an action cannot be looked up"""

    def __init__(self, action: str, reason: str) -> None:
        super().__init__(f"Failed to look up release for {action}: {reason}")
        self.action = action
        self.reason = reason


@dataclass(frozen=True)
class Resolution:
    """Target of a resolved action reference

    ``is_noop`` is set when the current ref already tracks the latest major
    release line and should be left alone; ``sha`` is empty in that case.
    """

    version: str
    sha: str
    is_noop: bool = False


class ReleaseResolver:
    """Resolves action references against the latest published release"""

    def __init__(self, client: ReleaseClient, cache: Optional[ReleaseCache] = None) -> None:
        """
        Initialize the resolver

        Args:
            client: Release lookup client (e.g., GitHubClient)
            cache: Cache shared between resolutions, a new one by default
        """
        self.client = client
        self.cache = cache if cache is not None else ReleaseCache()

    def resolve(self, identity: ActionIdentity, current_version: str) -> Optional[Resolution]:
        """
        Resolve the target version and SHA for an action reference

        Callers filter out the floating branch ref before calling.

        Args:
            identity: Repository of the action
            current_version: Version the workflow currently references

        Returns:
            Resolution, or None if the repository has no published release

        Raises:
            ReleaseLookupError: If the release lookup fails
        """
        info = self.cache.get(identity)
        if info is not None:
            return self._from_cache(identity, current_version, info)

        info = self._fetch(identity)
        if info is None:
            return None

        return Resolution(version=info.full_version, sha=info.sha)

    def _from_cache(
        self, identity: ActionIdentity, current_version: str, info: ReleaseInfo
    ) -> Resolution:
        if (
            is_major_constraint(current_version)
            and extract_major_version(current_version) == info.major_version
        ):
            logger.debug(
                "Keeping %s@%s, major version matches latest release %s",
                identity,
                current_version,
                info.full_version,
            )
            return Resolution(version=current_version, sha="", is_noop=True)

        logger.debug("Using cached release %s (%s) for %s", info.full_version, info.sha, identity)
        return Resolution(version=info.full_version, sha=info.sha)

    def _fetch(self, identity: ActionIdentity) -> Optional[ReleaseInfo]:
        try:
            release = self.client.get_latest_release(identity.owner, identity.repo)
        except GitHubAPIError as e:
            raise ReleaseLookupError(str(identity), str(e)) from e

        if release is None or not release.tag:
            logger.debug("No release found for %s", identity)
            return None

        sha = ""
        try:
            sha = self.client.get_tag_sha(identity.owner, identity.repo, release.tag) or ""
        except GitHubAPIError as e:
            logger.debug("Tag lookup failed for %s@%s: %s", identity, release.tag, e)

        if not sha:
            logger.debug(
                "Falling back to release target %r for %s@%s",
                release.target_commitish,
                identity,
                release.tag,
            )
            sha = release.target_commitish

        info = ReleaseInfo.from_release(release.tag, sha)
        self.cache.put(identity, info)
        logger.debug(
            "Cached release info for %s: major=%s full=%s sha=%s",
            identity,
            info.major_version,
            info.full_version,
            info.sha,
        )
        return info

    def resolve_tag(self, identity: ActionIdentity, tag: str) -> Optional[str]:
        """
        Resolve the commit SHA of a specific tag

        Args:
            identity: Repository of the action
            tag: Tag name (e.g., "v4.2.2")

        Returns:
            Commit SHA, or None if the tag does not exist

        Raises:
            ReleaseLookupError: If the lookup fails
        """
        try:
            return self.client.get_tag_sha(identity.owner, identity.repo, tag)
        except GitHubAPIError as e:
            raise ReleaseLookupError(f"{identity}@{tag}", str(e)) from e
