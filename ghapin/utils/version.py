"""
version.py - Version management utilities

This module provides version information for ghapin together with the
classification helpers used to decide what kind of ref an action is
pinned to (commit SHA, major constraint, semantic version).
"""

import re
import string
from typing import Any, Dict

# Version information
__version__ = "0.3.0"
__release_date__ = "2025-06-21"

FLOATING_BRANCH = "main"

_HEX_DIGITS = frozenset(string.hexdigits)
_VERSION_CHARS = frozenset("0123456789.")
_NUMERIC_MAJOR = re.compile(r"^v?[0-9]+$")


def get_version() -> str:
    """
    Get ghapin version

    Returns:
        Version string
    """
    return __version__


def get_version_info() -> Dict[str, Any]:
    """
    Get detailed version information

    Returns:
        Dictionary with version, release date, etc.
    """
    return {
        "version": __version__,
        "release_date": __release_date__,
        "release_year": int(__release_date__.split("-")[0]),
    }


def _strip_v(version: str) -> str:
    return version[1:] if version.startswith("v") else version


def is_floating_branch(version: str) -> bool:
    """Check if a ref is the floating branch that is never pinned"""
    return version == FLOATING_BRANCH


def is_commit_sha(version: str) -> bool:
    """
    Check if a version token is a full commit SHA

    Args:
        version: Version token (e.g., "v4", "v4.2.1", or a 40 character SHA)

    Returns:
        True if the token is exactly 40 hexadecimal characters
    """
    return len(version) == 40 and all(c in _HEX_DIGITS for c in version)


def is_major_constraint(version: str) -> bool:
    """
    Check if a version token only names a major release line

    "v4" and "4" are major constraints, "v4.3.0" is not. A commit SHA is
    never a major constraint even though it contains no dot.

    Args:
        version: Version token

    Returns:
        True if the token is a major version constraint
    """
    if not version:
        return False

    if is_commit_sha(version):
        return False

    return "." not in _strip_v(version)


def is_semantic_version(version: str) -> bool:
    """
    Check if a version token is a dotted numeric version (e.g., 1.2.3 or v1.2)

    Args:
        version: Version token

    Returns:
        True if the token only contains digits and dots, with at least one dot
    """
    version_str = _strip_v(version)
    return "." in version_str and all(c in _VERSION_CHARS for c in version_str)


def extract_major_version(version: str) -> str:
    """
    Extract the major version from a version token

    For example "v3.5.0" -> "v3", "4.2" -> "4" and "v4" -> "v4".

    Args:
        version: Version token

    Returns:
        Major version, keeping the "v" prefix if the input had one
    """
    if not version:
        return ""

    major = _strip_v(version).split(".")[0]

    if version.startswith("v"):
        return "v" + major

    return major


def looks_like_version(token: str) -> bool:
    """
    Check if a word from a comment looks like a version annotation

    Args:
        token: A single whitespace-free word

    Returns:
        True for semantic versions ("v4.4.0", "4.4") and numeric majors ("v4", "4")
    """
    if _NUMERIC_MAJOR.match(token):
        return True

    return is_semantic_version(token) and any(c.isdigit() for c in token)
