"""Error types with formatted source context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    IO = "io"
    MALFORMED_LINE = "malformed-line"
    UNKNOWN_HEADER_KEY = "unknown-header-key"
    DUPLICATE_HEADER_KEY = "duplicate-header-key"
    MISSING_HEADER_KEY = "missing-header-key"
    INVALID_DATE = "invalid-date"
    INVALID_TAG = "invalid-tag"
    UNTERMINATED_BLOCK = "unterminated-block"
    TOO_MANY_HEADER_LINES = "too-many-header-lines"
    TOO_MANY_LINES = "too-many-lines"


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column."""

    line: int
    column: int


class FieldError(ValueError):
    """Raised by field validators; column is 1-based within the field value."""

    def __init__(self, kind: ErrorKind, message: str, column: int = 1, width: int = 1) -> None:
        self.kind = kind
        self.message = message
        self.column = column
        self.width = width
        super().__init__(message)


class ParseError(Exception):
    """Raised on the first parse error, with line position and source context."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        position: Position,
        source_line: str = "",
        width: int = 1,
    ) -> None:
        self.kind = kind
        self.message = message
        self.position = position
        self.source_line = source_line
        self.width = width
        super().__init__(self.format())

    @property
    def line(self) -> int:
        return self.position.line

    def format(self, filename: str = "input.nudoc") -> str:
        col = self.position.column
        source_line = self.source_line

        # Underline the reported width, but stay within the line (at least 1 char)
        underline_len = max(1, min(self.width, len(source_line) - col + 1))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.position.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.position.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )
