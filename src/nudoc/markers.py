"""Line marker table and character classification helpers."""

from __future__ import annotations

from enum import Enum


class Marker(Enum):
    # Two-character line prefixes (marker + space)
    TOPIC = "# "
    LINK = "> "
    LIST_TITLE = "| "
    LIST_ITEM = "- "
    PRE_LINE = "' "
    COMMENT = "* "
    ALTERNATIVE = "~ "

    # Three-character fences
    PRE_FENCE = "```"
    COMMENT_FENCE = "***"


# Fences are checked first: "***" must not be read as a "* " comment.
_FENCES = (Marker.PRE_FENCE, Marker.COMMENT_FENCE)
_PREFIXES: dict[str, Marker] = {m.value: m for m in Marker if m not in _FENCES}

HEADER_SENTINEL = "---"
HEADER_SEPARATOR = ": "
TAG_MARKER = "#"
TAG_DELIMITER = " "


def classify(line: str) -> Marker | None:
    """Return the marker a line starts with, or None for paragraph text."""
    for fence in _FENCES:
        if line.startswith(fence.value):
            return fence
    return _PREFIXES.get(line[:2])


def strip_marker(line: str, marker: Marker) -> str:
    """Return the line content after its marker sequence."""
    return line[len(marker.value) :]


def is_blank(line: str) -> bool:
    """Return True if line contains only spaces and tabs (or is empty)."""
    return all(ch in " \t" for ch in line)


def is_tag_char(ch: str) -> bool:
    """Return True if ch may appear in a tag (lowercase ASCII letter or hyphen)."""
    return "a" <= ch <= "z" or ch == "-"
