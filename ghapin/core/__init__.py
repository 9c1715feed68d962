"""
core package for ghapin

This package contains the release lookup, caching, resolution and rewriting
functionality.
"""

from .cache import ReleaseCache, ReleaseInfo
from .config import (
    load_config,
    generate_default_config,
    ConfigurationError,
)
from .github import GitHubAPIError, GitHubClient, Release
from .processor import (
    ActionProcessor,
    Change,
    FileResult,
    find_actions_in_file,
    find_actions_in_files,
    summarize,
)
from .reference import (
    ActionIdentity,
    ActionReference,
    MalformedReferenceError,
    parse_action_reference,
)
from .resolver import ReleaseLookupError, ReleaseResolver, Resolution
from .rewriter import rewrite

__all__ = [
    "ReleaseCache",
    "ReleaseInfo",
    "load_config",
    "generate_default_config",
    "ConfigurationError",
    "GitHubAPIError",
    "GitHubClient",
    "Release",
    "ActionProcessor",
    "Change",
    "FileResult",
    "find_actions_in_file",
    "find_actions_in_files",
    "summarize",
    "ActionIdentity",
    "ActionReference",
    "MalformedReferenceError",
    "parse_action_reference",
    "ReleaseLookupError",
    "ReleaseResolver",
    "Resolution",
    "rewrite",
]
