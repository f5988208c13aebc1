"""Header parser: bounded ``Key: value`` lines ended by the ``---`` sentinel."""

from __future__ import annotations

import datetime
import re

from nudoc.errors import ErrorKind, FieldError
from nudoc.markers import HEADER_SENTINEL, HEADER_SEPARATOR, TAG_DELIMITER, TAG_MARKER, is_tag_char
from nudoc.nodes import Header
from nudoc.reader import LineReader

KEY_NAME = "Name"
KEY_DESC = "Description"
KEY_SLUG = "Slug"
KEY_DATE = "Date"
KEY_TAGS = "Tags"

HEADER_KEYS: tuple[str, ...] = (KEY_NAME, KEY_DESC, KEY_SLUG, KEY_DATE, KEY_TAGS)

# All keys + the sentinel line
MAX_HEADER_LINES = len(HEADER_KEYS) + 1

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_header(reader: LineReader) -> Header:
    """Read header lines from *reader* up to and including the sentinel."""
    values: dict[str, str] = {}
    date: datetime.date | None = None
    tags: tuple[str, ...] = ()

    for i in range(MAX_HEADER_LINES):
        line = reader.read_line()
        if line is None:
            raise reader.error(
                ErrorKind.UNTERMINATED_BLOCK,
                f"unexpected end of input in header (expected '{HEADER_SENTINEL}')",
            )
        if line == HEADER_SENTINEL:
            break
        if i == MAX_HEADER_LINES - 1:
            raise reader.error(
                ErrorKind.TOO_MANY_HEADER_LINES,
                f"too many header lines (expected '{HEADER_SENTINEL}' by line {MAX_HEADER_LINES})",
                width=len(line),
            )

        key, sep, value = line.partition(HEADER_SEPARATOR)
        if not sep:
            raise reader.error(
                ErrorKind.MALFORMED_LINE,
                f"invalid header line: expected 'Key{HEADER_SEPARATOR}value'",
                width=len(line),
            )
        if key not in HEADER_KEYS:
            raise reader.error(
                ErrorKind.UNKNOWN_HEADER_KEY, f"unknown header key '{key}'", width=len(key)
            )
        if key in values:
            raise reader.error(
                ErrorKind.DUPLICATE_HEADER_KEY, f"duplicate header key '{key}'", width=len(key)
            )

        value_column = len(key) + len(HEADER_SEPARATOR) + 1
        try:
            if key == KEY_DATE:
                date = parse_date(value, value_column)
            elif key == KEY_TAGS:
                tags = parse_tags(value, value_column)
        except FieldError as exc:
            raise reader.wrap_error(exc) from exc
        values[key] = value

    missing = [k for k in HEADER_KEYS if k not in values]
    if missing:
        raise reader.error(
            ErrorKind.MISSING_HEADER_KEY,
            f"missing header key{'s' if len(missing) > 1 else ''}: {', '.join(missing)}",
        )

    assert date is not None
    return Header(
        name=values[KEY_NAME],
        desc=values[KEY_DESC],
        slug=values[KEY_SLUG],
        date=date,
        tags=tags,
    )


# ---------------------------------------------------------------------------
# Field validators
# ---------------------------------------------------------------------------


def parse_date(value: str, column: int = 1) -> datetime.date:
    """Parse a ``YYYY-MM-DD`` calendar date.

    *column* is where the value starts in its source line, for error reporting.
    """
    try:
        if not _DATE_RE.fullmatch(value):
            raise ValueError(f"'{value}' does not match YYYY-MM-DD")
        return datetime.date.fromisoformat(value)
    except ValueError as exc:
        raise FieldError(
            ErrorKind.INVALID_DATE, f"invalid date: {exc}", column, max(1, len(value))
        ) from exc


def parse_tags(value: str, column: int = 1) -> tuple[str, ...]:
    """Split a space-delimited tag list and validate each tag."""
    tags: list[str] = []
    offset = 0
    for raw in value.split(TAG_DELIMITER):
        tags.append(parse_tag(raw, column + offset))
        offset += len(raw) + len(TAG_DELIMITER)
    return tuple(tags)


def parse_tag(value: str, column: int = 1) -> str:
    """Validate a single ``#tag`` and return it without its marker."""
    if not value:
        raise FieldError(ErrorKind.INVALID_TAG, f"invalid tag: empty tag at column {column}", column)
    if not value.startswith(TAG_MARKER):
        raise FieldError(
            ErrorKind.INVALID_TAG,
            f"invalid tag '{value}': missing leading '{TAG_MARKER}' at column {column}",
            column,
            len(value),
        )
    tag = value[len(TAG_MARKER) :]
    if not tag:
        raise FieldError(ErrorKind.INVALID_TAG, f"invalid tag: empty tag at column {column}", column)
    for i, ch in enumerate(tag):
        if not is_tag_char(ch):
            ch_column = column + len(TAG_MARKER) + i
            raise FieldError(
                ErrorKind.INVALID_TAG,
                f"invalid tag '{value}': forbidden character {ch!r} at column {ch_column}",
                ch_column,
            )
    return tag
