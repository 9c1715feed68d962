"""
formatter.py - Output formatting utilities

This module provides console formatting for ghapin: color support
detection and unified diffs of rewritten files.
"""

import difflib
import os
import platform
import sys
from typing import Dict, Iterable

# ANSI color codes
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
}

DIFF_COLORS = {
    "+": "green",
    "-": "red",
    "@": "cyan",
}


def supports_color() -> bool:
    """
    Check if the terminal supports color output

    Returns:
        True if color is supported, False otherwise
    """
    if os.environ.get("NO_COLOR") is not None:
        return False

    if os.environ.get("GHAPIN_NO_COLOR") is not None:
        return False

    if platform.system() == "Windows":
        return (
            os.environ.get("ANSICON") is not None
            or os.environ.get("WT_SESSION") is not None
            or os.environ.get("ConEmuANSI") == "ON"
            or os.environ.get("TERM_PROGRAM") is not None
        )

    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def colorize(text: str, color: str, enabled: bool = True) -> str:
    """
    Apply color to text if supported

    Args:
        text: Text to colorize
        color: Color name from COLORS dict
        enabled: Set to False to never colorize

    Returns:
        Colorized text or original text if color not supported
    """
    if not enabled or color not in COLORS or not supports_color():
        return text

    return f"{COLORS[color]}{text}{COLORS['reset']}"


def _colorize_diff_line(line: str, enabled: bool) -> str:
    if line.startswith(("+++", "---")):
        return colorize(line, "bold", enabled)
    color = DIFF_COLORS.get(line[:1])
    return colorize(line, color, enabled) if color else line


def unified_diff(file_path: str, original: str, updated: str, color: bool = True) -> str:
    """
    Render the unified diff between two versions of a file

    Args:
        file_path: Path shown in the diff header
        original: Content before rewriting
        updated: Content after rewriting
        color: Whether to colorize added and removed lines

    Returns:
        Diff text, empty if the contents are equal
    """
    if original == updated:
        return ""

    diff_lines: Iterable[str] = difflib.unified_diff(
        original.splitlines(),
        updated.splitlines(),
        fromfile=f"a/{file_path}",
        tofile=f"b/{file_path}",
        lineterm="",
    )

    return "\n".join(_colorize_diff_line(line, color) for line in diff_lines)


def format_summary(title: str, counts: Dict[str, int]) -> str:
    """
    Format a summary block

    Args:
        title: Summary title
        counts: Label to count mapping, in display order

    Returns:
        Multi-line summary text
    """
    lines = [f"----- {title} -----"]
    width = max((len(label) for label in counts), default=0)
    for label, count in counts.items():
        lines.append(f"{label + ':':<{width + 1}} {count}")
    return "\n".join(lines)
