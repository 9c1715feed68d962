"""
ghapin - pin and update GitHub Actions

Pins the actions used by GitHub Actions workflows to the commit SHA of their
latest release and keeps pinned or tagged references up to date, rewriting
workflow files in place without disturbing their formatting.
"""

from ghapin.utils.version import __version__, get_version, get_version_info

from .core import (
    ActionProcessor,
    ConfigurationError,
    GitHubClient,
    ReleaseCache,
    ReleaseResolver,
    find_actions_in_files,
    generate_default_config,
    load_config,
    rewrite,
)
from .utils.banner import _BANNER

__all__ = [
    "__version__",
    "get_version",
    "get_version_info",
    "ActionProcessor",
    "ConfigurationError",
    "GitHubClient",
    "ReleaseCache",
    "ReleaseResolver",
    "find_actions_in_files",
    "generate_default_config",
    "load_config",
    "rewrite",
    "_BANNER",
]


def main() -> int | None:
    """Main entry point for the ghapin CLI tool"""
    from typing import Optional, cast

    from .cli import cli

    return cast(Optional[int], cli())
