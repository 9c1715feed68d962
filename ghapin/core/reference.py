"""
reference.py - Action references found in workflow files

This module parses the raw values of ``uses:`` keys into action references
and derives the repository identity that releases are looked up by.
"""

from dataclasses import dataclass
from typing import Optional

from ..utils.version import is_commit_sha, is_floating_branch


class MalformedReferenceError(ValueError):
    """Raised when a name is not an ``owner/repo[/path]`` action name"""

    pass


@dataclass(frozen=True)
class ActionIdentity:
    """Repository that publishes an action (sub-paths dropped)"""

    owner: str
    repo: str

    @classmethod
    def from_action(cls, action_name: str) -> "ActionIdentity":
        """
        Build the identity of an action name

        Args:
            action_name: Action name such as "actions/cache" or "actions/cache/save"

        Returns:
            Identity with the sub-path removed

        Raises:
            MalformedReferenceError: If the name is not a repository action
        """
        name = action_name.strip()
        if name.startswith(("./", "../", "docker://")):
            raise MalformedReferenceError(f"Not a repository action: {action_name}")

        parts = name.split("/", 2)
        if len(parts) < 2 or not parts[0] or not parts[1]:
            raise MalformedReferenceError(f"Invalid action name: {action_name}")

        return cls(owner=parts[0], repo=parts[1])

    def __str__(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True)
class ActionReference:
    """A single ``name@version`` reference"""

    name: str
    version: str

    @property
    def identity(self) -> ActionIdentity:
        return ActionIdentity.from_action(self.name)

    @property
    def ref(self) -> str:
        return f"{self.name}@{self.version}"

    @property
    def is_floating_branch(self) -> bool:
        return is_floating_branch(self.version)

    @property
    def is_commit_sha(self) -> bool:
        return is_commit_sha(self.version)


def parse_action_reference(uses: str) -> Optional[ActionReference]:
    """
    Parse the value of a ``uses:`` key

    Args:
        uses: Raw value (e.g., "actions/checkout@v4")

    Returns:
        Parsed reference, or None if the value is not a versioned
        repository action (local paths, docker images, malformed values)
    """
    parts = uses.strip().split("@")
    if len(parts) != 2:
        return None

    name, version = parts[0].strip(), parts[1].strip()
    if not version:
        return None

    try:
        ActionIdentity.from_action(name)
    except MalformedReferenceError:
        return None

    return ActionReference(name=name, version=version)
