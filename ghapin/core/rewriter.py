"""
rewriter.py - Text rewriting of action references

References are rewritten on the original document text, one line at a
time, so everything other than the reference and its trailing comment is
left byte-for-byte as it was. The YAML is never re-serialized.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from ..utils.version import is_floating_branch, looks_like_version


class CommentShape(Enum):
    """Shapes of the comment trailing a reference"""

    EMPTY = "empty"
    VERSION_PREFIXED = "version-prefixed"
    PIN_STYLE = "pin-style"
    EMBEDDED_VERSION = "embedded-version"
    FREE_TEXT = "free-text"


@dataclass(frozen=True)
class CommentMatch:
    """Classified comment; ``index`` is the token that carries the version"""

    shape: CommentShape
    index: int = 0


Matcher = Callable[[Sequence[str], str], Optional[int]]


def _match_empty(tokens: Sequence[str], version: str) -> Optional[int]:
    return 0 if not tokens else None


def _match_version_prefixed(tokens: Sequence[str], version: str) -> Optional[int]:
    first = tokens[0]
    return 0 if first == version or looks_like_version(first) else None


def _match_pin_style(tokens: Sequence[str], version: str) -> Optional[int]:
    return 0 if "@" in tokens[0] else None


def _match_embedded_version(tokens: Sequence[str], version: str) -> Optional[int]:
    for index, token in enumerate(tokens[1:], start=1):
        if token == version or looks_like_version(token):
            return index
    return None


def _match_free_text(tokens: Sequence[str], version: str) -> Optional[int]:
    return 0


# Evaluated in order, first match wins
COMMENT_RULES: Tuple[Tuple[CommentShape, Matcher], ...] = (
    (CommentShape.EMPTY, _match_empty),
    (CommentShape.VERSION_PREFIXED, _match_version_prefixed),
    (CommentShape.PIN_STYLE, _match_pin_style),
    (CommentShape.EMBEDDED_VERSION, _match_embedded_version),
    (CommentShape.FREE_TEXT, _match_free_text),
)


def classify_comment(tokens: Sequence[str], version: str) -> CommentMatch:
    """
    Classify a tokenized comment

    Args:
        tokens: Comment text split on whitespace
        version: Version that will be written into the comment

    Returns:
        The first matching rule of COMMENT_RULES
    """
    for shape, matcher in COMMENT_RULES:
        index = matcher(tokens, version)
        if index is not None:
            return CommentMatch(shape, index)

    return CommentMatch(CommentShape.FREE_TEXT)


def _apply_comment_match(tokens: List[str], match: CommentMatch, version: str) -> List[str]:
    if match.shape is CommentShape.EMPTY:
        return [version]

    if match.shape is CommentShape.PIN_STYLE:
        prefix = tokens[0].split("@", 1)[0]
        return [f"{prefix}@{version}"] + tokens[1:]

    if match.shape is CommentShape.FREE_TEXT:
        return [version] + tokens

    updated = list(tokens)
    updated[match.index] = version
    return updated


def update_version_comment(line: str, version: str) -> str:
    """
    Write a version into the comment trailing a line

    Args:
        line: Line of YAML, with or without a "#" comment
        version: Version to show (e.g., "v4.4.0")

    Returns:
        Line ending in " # " followed by the updated comment
    """
    code, _, comment = line.partition("#")
    code = code.rstrip()

    tokens = comment.split()
    match = classify_comment(tokens, version)

    return f"{code} # " + " ".join(_apply_comment_match(tokens, match, version))


def _reference_pattern(action_name: str, version: str) -> "re.Pattern[str]":
    # Whole references only: "@v3" must not match inside "@v3.1.0" or "@v30"
    return re.compile(
        r"(?<![\w./-])" + re.escape(f"{action_name}@{version}") + r"(?![\w.-])"
    )


def rewrite(
    text: str,
    action_name: str,
    current_version: str,
    target_version: str,
    target_sha: str,
    display_version: str,
) -> str:
    """
    Rewrite every reference to ``action_name@current_version`` in a document

    The reference becomes ``action_name@target_sha`` when a SHA is given and
    ``action_name@target_version`` otherwise, and the line's comment is
    updated to show ``display_version``.

    Args:
        text: Document text
        action_name: Action name as written in the document
        current_version: Version currently referenced
        target_version: Version to reference when no SHA is given
        target_sha: Commit SHA to pin to, or "" to keep a version tag
        display_version: Version shown in the trailing comment

    Returns:
        Rewritten document text
    """
    if is_floating_branch(current_version):
        return text

    new_ref = f"{action_name}@{target_sha or target_version}"
    pattern = _reference_pattern(action_name, current_version)

    lines = text.split("\n")
    for i, line in enumerate(lines):
        if not pattern.search(line):
            continue

        eol = ""
        if line.endswith("\r"):
            line, eol = line[:-1], "\r"

        updated = pattern.sub(lambda _: new_ref, line, count=1)
        if display_version:
            updated = update_version_comment(updated, display_version)

        lines[i] = updated + eol

    return "\n".join(lines)
