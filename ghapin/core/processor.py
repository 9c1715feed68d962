"""
processor.py - Pinning and updating of actions in workflow files

This module walks the ``uses:`` references of workflow and composite action
files, resolves each one and rewrites the file text. Files are only written
when the processor runs in write mode; otherwise the rewritten text is kept
on the result so it can be shown as a diff.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

import yaml

from ..utils.file_handler import read_text_file, safe_write_file
from ..utils.version import extract_major_version, is_commit_sha, is_major_constraint
from ..utils.yaml_handler import extract_uses
from .reference import ActionIdentity, ActionReference, parse_action_reference
from .resolver import ReleaseLookupError, ReleaseResolver, Resolution
from .rewriter import rewrite

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
T = TypeVar("T")
R = TypeVar("R")


@dataclass
class Change:
    """A reference rewritten in a file"""

    action: str
    old_ref: str
    new_ref: str
    version: str


@dataclass
class FileResult:
    """Outcome of processing one file"""

    path: str
    original: str = ""
    updated: str = ""
    changes: List[Change] = field(default_factory=list)
    errors: int = 0
    written: bool = False

    @property
    def modified(self) -> bool:
        return self.original != self.updated


ReferenceHandler = Callable[[FileResult, ActionReference], None]


def _read_references(file_path: str) -> List[ActionReference]:
    content = read_text_file(file_path)
    references = []
    for uses in extract_uses(content):
        ref = parse_action_reference(uses)
        if ref is not None and not ref.is_floating_branch:
            references.append(ref)
    return references


def find_actions_in_file(file_path: PathLike) -> List[str]:
    """
    Find the actions referenced in a file

    Floating branch refs and values that are not versioned repository
    actions are left out.

    Args:
        file_path: Path to a workflow or action file

    Returns:
        Action names in document order, or an empty list if the file
        cannot be read or parsed
    """
    try:
        return [ref.name for ref in _read_references(str(file_path))]
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Failed to read file %s: %s", file_path, e)
    except yaml.YAMLError as e:
        logger.error("Failed to parse file %s: %s", file_path, e)
    return []


def find_actions_in_files(files: Iterable[PathLike]) -> List[str]:
    """
    Find the unique actions referenced in a set of files

    Args:
        files: Paths to workflow or action files

    Returns:
        Sorted list of unique action names
    """
    actions = set()
    for file_path in files:
        actions.update(find_actions_in_file(file_path))
    return sorted(actions)


class ActionProcessor:
    """Pins and updates action references in workflow files"""

    def __init__(
        self,
        resolver: ReleaseResolver,
        config: Optional[Dict[str, Any]] = None,
        write: bool = False,
    ) -> None:
        """
        Initialize the processor

        Args:
            resolver: Release resolver shared by all files
            config: Configuration dictionary
            write: Whether to write changed files back to disk
        """
        self.resolver = resolver
        self.config = config or {}
        self.write = write
        self.max_workers = int(self.config.get("max_workers", 1))
        self.create_backup = bool(self.config.get("create_backup", False))
        self.exclude_actions: List[str] = list(self.config.get("exclude_actions", []))

    def is_excluded(self, action_name: str) -> bool:
        """
        Check if an action is excluded by configuration

        Entries are exact action names or "owner/*" patterns.

        Args:
            action_name: Action name (e.g., "actions/checkout")

        Returns:
            True if the action must not be touched
        """
        for pattern in self.exclude_actions:
            if pattern.endswith("/*"):
                if action_name.startswith(pattern[:-1]):
                    return True
            elif action_name == pattern:
                return True
        return False

    def pin_all(self, files: Sequence[PathLike]) -> List[FileResult]:
        """
        Pin every action reference to the commit SHA of its latest release

        Args:
            files: Paths to workflow or action files

        Returns:
            One FileResult per file, in input order
        """
        return self._run(files, self._pin_latest)

    def pin_action(
        self, files: Sequence[PathLike], action_name: str, version: str
    ) -> List[FileResult]:
        """
        Pin one action to the commit SHA of a specific version

        Args:
            files: Paths to workflow or action files
            action_name: Action to pin (e.g., "actions/checkout")
            version: Tag to pin to (e.g., "v4.2.2")

        Returns:
            One FileResult per file, or an empty list if the tag cannot be
            resolved to a commit SHA
        """
        identity = ActionIdentity.from_action(action_name)

        try:
            sha = self.resolver.resolve_tag(identity, version)
        except ReleaseLookupError as e:
            logger.error("%s", e)
            return []

        if not sha or not is_commit_sha(sha):
            logger.warning("No SHA found for %s@%s, skipping this action", action_name, version)
            return []

        def handle(result: FileResult, ref: ActionReference) -> None:
            if ref.name != action_name:
                return
            if ref.version == sha:
                logger.debug("%s is already pinned to %s in %s", action_name, version, result.path)
                return
            self._apply(result, ref, version, sha, version)

        return self._run(files, handle)

    def update(
        self, files: Sequence[PathLike], action_name: Optional[str] = None
    ) -> List[FileResult]:
        """
        Update action references to their latest release

        SHA refs move to the SHA of the latest release, major constraints
        move to its major version and any other tag to the full version.
        The trailing comment always shows the full version.

        Args:
            files: Paths to workflow or action files
            action_name: Only update this action, or every action if None

        Returns:
            One FileResult per file, in input order
        """

        def handle(result: FileResult, ref: ActionReference) -> None:
            if action_name is not None and ref.name != action_name:
                return
            self._update_latest(result, ref)

        return self._run(files, handle)

    def _map(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        if self.max_workers <= 1 or len(items) <= 1:
            return [func(item) for item in items]

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(func, items))

    def _run(self, files: Sequence[PathLike], handle: ReferenceHandler) -> List[FileResult]:
        # Only file I/O runs on the pool; references are resolved in input order
        loaded = self._map(self._load_file, [str(f) for f in files])

        results = []
        for result, uses_values in loaded:
            self._process_references(result, uses_values, handle)
            results.append(result)

        if self.write:
            self._map(self._write_file, [r for r in results if r.modified])

        return results

    def _load_file(self, file_path: str) -> Tuple[FileResult, List[str]]:
        result = FileResult(path=file_path)

        try:
            content = read_text_file(file_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read file %s: %s", file_path, e)
            result.errors += 1
            return result, []

        result.original = result.updated = content

        try:
            uses_values = extract_uses(content)
        except yaml.YAMLError as e:
            logger.error("Failed to parse file %s: %s", file_path, e)
            result.errors += 1
            return result, []

        return result, uses_values

    def _process_references(
        self, result: FileResult, uses_values: List[str], handle: ReferenceHandler
    ) -> None:
        file_path = result.path
        seen = set()
        for uses in uses_values:
            ref = parse_action_reference(uses)
            if ref is None:
                logger.debug("Skipping %r in %s, not a versioned action", uses, file_path)
                continue
            if ref.is_floating_branch:
                logger.debug("Skipping action with 'main' version %s in %s", ref.name, file_path)
                continue
            if self.is_excluded(ref.name):
                logger.debug("Skipping excluded action %s in %s", ref.name, file_path)
                continue
            if ref in seen:
                continue
            seen.add(ref)

            logger.debug("Processing %s in %s", ref.ref, file_path)
            handle(result, ref)

        if not result.modified:
            logger.info("No changes to file %s", file_path)

    def _write_file(self, result: FileResult) -> None:
        result.written = safe_write_file(result.path, result.updated, self.create_backup)
        if result.written:
            logger.info("Successfully wrote %s", result.path)
        else:
            result.errors += 1

    def _resolve(self, result: FileResult, ref: ActionReference) -> Optional[Resolution]:
        try:
            resolution = self.resolver.resolve(ref.identity, ref.version)
        except ReleaseLookupError as e:
            logger.error("%s", e)
            result.errors += 1
            return None

        if resolution is None:
            logger.info("No release found for action %s", ref.name)

        return resolution

    def _apply(
        self,
        result: FileResult,
        ref: ActionReference,
        target_version: str,
        target_sha: str,
        display_version: str,
    ) -> None:
        updated = rewrite(
            result.updated, ref.name, ref.version, target_version, target_sha, display_version
        )
        if updated == result.updated:
            return

        new_ref = f"{ref.name}@{target_sha or target_version}"
        result.changes.append(Change(ref.name, ref.ref, new_ref, display_version))
        result.updated = updated
        logger.info("%s -> %s (%s) in %s", ref.ref, new_ref, display_version, result.path)

    def _pin_latest(self, result: FileResult, ref: ActionReference) -> None:
        resolution = self._resolve(result, ref)
        if resolution is None:
            return

        if resolution.is_noop:
            logger.info(
                "Keeping %s in %s, it tracks the latest major release", ref.ref, result.path
            )
            return

        if not is_commit_sha(resolution.sha):
            logger.warning(
                "No SHA found for %s@%s, skipping this action", ref.name, resolution.version
            )
            return

        if ref.version == resolution.sha:
            logger.info("%s is already pinned to the latest release in %s", ref.name, result.path)
            return

        self._apply(result, ref, resolution.version, resolution.sha, resolution.version)

    def _update_latest(self, result: FileResult, ref: ActionReference) -> None:
        resolution = self._resolve(result, ref)
        if resolution is None:
            return

        if resolution.is_noop:
            logger.info("%s is already up to date in %s", ref.ref, result.path)
            return

        latest, sha = resolution.version, resolution.sha

        if ref.is_commit_sha:
            if not is_commit_sha(sha):
                logger.warning("No SHA found for %s@%s, skipping this action", ref.name, latest)
                return
            if ref.version == sha:
                logger.info("%s is already up to date in %s", ref.ref, result.path)
                return
            self._apply(result, ref, latest, sha, latest)
        elif is_major_constraint(ref.version):
            self._apply(result, ref, extract_major_version(latest), "", latest)
        elif ref.version != latest:
            self._apply(result, ref, latest, "", latest)
        else:
            logger.info("%s is already up to date in %s", ref.ref, result.path)


def summarize(results: Sequence[FileResult]) -> Dict[str, int]:
    """
    Summarize processing results

    Args:
        results: Results returned by an ActionProcessor

    Returns:
        Counts of files, changes, writes and errors
    """
    return {
        "total_files": len(results),
        "files_changed": sum(1 for r in results if r.modified),
        "references_updated": sum(len(r.changes) for r in results),
        "files_written": sum(1 for r in results if r.written),
        "errors": sum(r.errors for r in results),
    }
