"""NuDoc line-oriented document format: parser and renderers."""

from __future__ import annotations

from nudoc.errors import ErrorKind, ParseError, Position
from nudoc.parser import parse, parse_string
from nudoc.render import HeaderTemplate, OutputFormat, render

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "HeaderTemplate",
    "OutputFormat",
    "ParseError",
    "Position",
    "compile",
    "parse",
    "parse_string",
    "render",
]


def compile(
    source: str,
    fmt: OutputFormat | str = OutputFormat.HTML,
    template: HeaderTemplate | None = None,
) -> str:
    """Parse NuDoc source and render it in the requested format."""
    return render(parse_string(source), fmt, template)
