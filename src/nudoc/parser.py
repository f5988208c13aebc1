"""NuDoc parser: reads a header and a body from a line stream into a Document."""

from __future__ import annotations

import io
from typing import IO

from nudoc.body import MAX_BODY_LINES, BodyParser
from nudoc.header import parse_header
from nudoc.nodes import Document
from nudoc.reader import LineReader


def parse(stream: IO[str] | IO[bytes], *, max_body_lines: int = MAX_BODY_LINES) -> Document:
    """Parse a complete document from *stream*.

    The stream is read forward to its end; it is not closed. Raises
    ParseError on the first problem, in which case no Document is produced.
    """
    reader = LineReader(stream)
    header = parse_header(reader)
    body = BodyParser(reader, max_body_lines).parse()
    return Document(header, body)


def parse_string(source: str, *, max_body_lines: int = MAX_BODY_LINES) -> Document:
    """Convenience function: parse a document held in a string."""
    return parse(io.StringIO(source), max_body_lines=max_body_lines)
