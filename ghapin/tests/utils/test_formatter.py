"""
test_formatter.py - Tests for output formatting
"""

from unittest.mock import patch

from ghapin.utils.formatter import COLORS, colorize, format_summary, supports_color, unified_diff


def test_supports_color_no_color(monkeypatch):
    """NO_COLOR disables colors."""
    monkeypatch.setenv("NO_COLOR", "1")
    assert supports_color() is False


def test_colorize():
    """Text is wrapped in ANSI codes only when enabled and supported."""
    with patch("ghapin.utils.formatter.supports_color", return_value=True):
        assert colorize("x", "red") == f"{COLORS['red']}x{COLORS['reset']}"
        assert colorize("x", "red", enabled=False) == "x"
        assert colorize("x", "purple") == "x"

    with patch("ghapin.utils.formatter.supports_color", return_value=False):
        assert colorize("x", "red") == "x"


def test_unified_diff():
    """The diff names both sides and shows changed lines."""
    original = "a\n- uses: actions/checkout@v4\nb\n"
    updated = "a\n- uses: actions/checkout@v4.2.2 # v4.2.2\nb\n"

    diff = unified_diff("ci.yml", original, updated, color=False)
    lines = diff.splitlines()

    assert lines[0] == "--- a/ci.yml"
    assert lines[1] == "+++ b/ci.yml"
    assert "-- uses: actions/checkout@v4" in lines
    assert "+- uses: actions/checkout@v4.2.2 # v4.2.2" in lines


def test_unified_diff_colored():
    """Added and removed lines are colored."""
    with patch("ghapin.utils.formatter.supports_color", return_value=True):
        diff = unified_diff("ci.yml", "a\n", "b\n")

    assert f"{COLORS['red']}-a{COLORS['reset']}" in diff
    assert f"{COLORS['green']}+b{COLORS['reset']}" in diff


def test_unified_diff_no_changes():
    """Equal contents produce no diff."""
    assert unified_diff("ci.yml", "a\n", "a\n") == ""


def test_format_summary():
    """Labels are aligned under the title."""
    text = format_summary("Pin Summary", {"Files": 2, "Errors": 0})

    assert text.splitlines() == [
        "----- Pin Summary -----",
        "Files:  2",
        "Errors: 0",
    ]
