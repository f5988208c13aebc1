"""Line reader: forward-only logical lines with a 1-based line counter."""

from __future__ import annotations

from typing import IO

from nudoc.errors import ErrorKind, FieldError, ParseError, Position


class LineReader:
    """Read logical lines from a text or binary stream.

    Bytes are decoded as UTF-8 and a leading byte order mark is dropped.
    One trailing ``\\n`` or ``\\r\\n`` is stripped from each line; other
    whitespace is left alone. The stream is never opened or closed here.
    """

    def __init__(self, stream: IO[str] | IO[bytes], encoding: str = "utf-8") -> None:
        self._stream = stream
        self._encoding = encoding
        self._line = 0
        self._current = ""

    @property
    def line(self) -> int:
        """Number of the most recently read line (0 before the first read)."""
        return self._line

    @property
    def current(self) -> str:
        """Text of the most recently read line."""
        return self._current

    def read_line(self) -> str | None:
        """Return the next line, or None at end of input."""
        try:
            raw = self._stream.readline()
            if isinstance(raw, bytes):
                raw = raw.decode(self._encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise self.wrap_error(exc) from exc

        if not raw:
            return None

        # A byte order mark may only precede the first line.
        if self._line == 0 and raw.startswith("\ufeff"):
            raw = raw[1:]

        if raw.endswith("\r\n"):
            raw = raw[:-2]
        elif raw.endswith("\n"):
            raw = raw[:-1]

        self._line += 1
        self._current = raw
        return raw

    # ------------------------------------------------------------------
    # Error helpers
    # ------------------------------------------------------------------

    def _position(self, column: int = 1) -> Position:
        return Position(max(self._line, 1), column)

    def error(
        self, kind: ErrorKind, message: str, column: int = 1, width: int = 1
    ) -> ParseError:
        """Build a ParseError positioned on the current line."""
        return ParseError(kind, message, self._position(column), self._current, width)

    def wrap_error(self, exc: Exception) -> ParseError:
        """Attach the current line number to any error."""
        if isinstance(exc, ParseError):
            return exc
        if isinstance(exc, FieldError):
            err = self.error(exc.kind, exc.message, exc.column, exc.width)
        elif isinstance(exc, UnicodeDecodeError):
            err = self.error(ErrorKind.IO, f"invalid {self._encoding} input: {exc.reason}")
        else:
            err = self.error(ErrorKind.IO, f"read error: {exc}")
        err.__cause__ = exc
        return err
