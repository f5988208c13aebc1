"""Body parser: dispatches each block by its leading marker sequence."""

from __future__ import annotations

from nudoc.errors import ErrorKind, ParseError
from nudoc.markers import Marker, classify, is_blank, strip_marker
from nudoc.nodes import (
    Alternative,
    Body,
    Link,
    List,
    Node,
    Paragraph,
    PreformattedTextBlock,
    PreformattedTextLine,
    Topic,
)
from nudoc.reader import LineReader

MAX_BODY_LINES = 100_000

_FENCE = Marker.PRE_FENCE.value
# A content line starting with one extra backtick before the fence is escaped.
_ESCAPED_FENCE = "`" + _FENCE


class BodyParser:
    """Line-driven state machine over the lines following the header."""

    def __init__(self, reader: LineReader, max_lines: int = MAX_BODY_LINES) -> None:
        self._reader = reader
        self._max_lines = max_lines
        self._first_line = reader.line
        self._nodes: list[Node] = []

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _next(self) -> str | None:
        line = self._reader.read_line()
        if line is not None and self._reader.line - self._first_line > self._max_lines:
            raise self._error(
                ErrorKind.TOO_MANY_LINES, f"too many body lines (limit {self._max_lines})"
            )
        return line

    def _error(self, kind: ErrorKind, message: str, column: int = 1, width: int = 1) -> ParseError:
        return self._reader.error(kind, message, column, width)

    def _unterminated(self, what: str, start_line: int) -> ParseError:
        return self._error(
            ErrorKind.UNTERMINATED_BLOCK,
            f"unexpected end of input: {what} opened on line {start_line}",
        )

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def parse(self) -> Body:
        while (line := self._next()) is not None:
            if is_blank(line):
                continue
            self._parse_block(line)
        return Body(tuple(self._nodes))

    def _parse_block(self, line: str) -> None:
        marker = classify(line)
        match marker:
            case None:
                self._nodes.append(self._parse_paragraph(line))
            case Marker.TOPIC:
                self._nodes.append(Topic(strip_marker(line, marker)))
            case Marker.LINK:
                self._nodes.append(self._parse_link(line))
            case Marker.LIST_TITLE:
                self._nodes.append(self._parse_list(strip_marker(line, marker), []))
            case Marker.LIST_ITEM:
                self._nodes.append(self._parse_list(None, [strip_marker(line, marker)]))
            case Marker.PRE_LINE:
                self._nodes.append(PreformattedTextLine(strip_marker(line, marker)))
            case Marker.ALTERNATIVE:
                self._nodes.append(self._parse_alternative(line))
            case Marker.PRE_FENCE:
                self._nodes.append(self._parse_preformatted(line))
            case Marker.COMMENT:
                pass
            case Marker.COMMENT_FENCE:
                self._skip_comment_block()

    # ------------------------------------------------------------------
    # Single-line blocks
    # ------------------------------------------------------------------

    def _parse_link(self, line: str) -> Link:
        value = strip_marker(line, Marker.LINK)
        url, sep, label = value.partition(" ")
        if not sep:
            raise self._error(
                ErrorKind.MALFORMED_LINE,
                "invalid link: expected '> URL LABEL'",
                len(Marker.LINK.value) + 1,
                max(1, len(value)),
            )
        if not url:
            raise self._error(
                ErrorKind.MALFORMED_LINE, "invalid link: empty URL", len(Marker.LINK.value) + 1
            )
        if not label:
            raise self._error(
                ErrorKind.MALFORMED_LINE, "invalid link: empty label", len(line) + 1
            )
        return Link(url, label)

    # ------------------------------------------------------------------
    # Multi-line blocks
    # ------------------------------------------------------------------

    def _parse_list(self, title: str | None, items: list[str]) -> List:
        start_line = self._reader.line
        while True:
            line = self._next()
            if line is None:
                raise self._unterminated("list is missing its trailing blank line", start_line)
            if is_blank(line):
                break
            if classify(line) is not Marker.LIST_ITEM:
                raise self._error(
                    ErrorKind.MALFORMED_LINE,
                    f"invalid list item: expected '{Marker.LIST_ITEM.value}' prefix",
                    width=2,
                )
            items.append(strip_marker(line, Marker.LIST_ITEM))

        if not items:
            raise self._error(
                ErrorKind.MALFORMED_LINE, f"list opened on line {start_line} has no items"
            )
        return List(title, tuple(items))

    def _parse_alternative(self, line: str) -> Alternative:
        lines = [strip_marker(line, Marker.ALTERNATIVE)]
        while (line := self._next()) is not None:
            if is_blank(line):
                break
            if classify(line) is not Marker.ALTERNATIVE:
                raise self._error(
                    ErrorKind.MALFORMED_LINE,
                    f"invalid alternative text: expected '{Marker.ALTERNATIVE.value}' prefix",
                    width=2,
                )
            lines.append(strip_marker(line, Marker.ALTERNATIVE))
        return Alternative("\n".join(lines))

    def _parse_preformatted(self, line: str) -> PreformattedTextBlock:
        start_line = self._reader.line
        content_type = strip_marker(line, Marker.PRE_FENCE) or None
        if content_type is not None and (" " in content_type or "\t" in content_type):
            raise self._error(
                ErrorKind.MALFORMED_LINE,
                "invalid preformatted fence: content type must be a single word",
                len(_FENCE) + 1,
                len(content_type),
            )

        content: list[str] = []
        while True:
            line = self._next()
            if line is None:
                raise self._unterminated("preformatted block", start_line)
            if line.startswith(_ESCAPED_FENCE):
                content.append(line[1:] + "\n")
                continue
            if line.startswith(_FENCE):
                legend = self._closing_legend(line)
                break
            content.append(line + "\n")

        return PreformattedTextBlock("".join(content), content_type, legend)

    def _closing_legend(self, line: str) -> str | None:
        rest = line[len(_FENCE) :]
        if not rest:
            return None
        if not rest.startswith(" "):
            raise self._error(
                ErrorKind.MALFORMED_LINE,
                "invalid closing fence: expected a space before the legend",
                len(_FENCE) + 1,
            )
        return rest[1:] or None

    def _skip_comment_block(self) -> None:
        start_line = self._reader.line
        while True:
            line = self._next()
            if line is None:
                raise self._unterminated("multiline comment", start_line)
            if line.startswith(Marker.COMMENT_FENCE.value):
                return

    def _parse_paragraph(self, line: str) -> Paragraph:
        lines = [line + "\n"]
        while (line := self._next()) is not None:
            if is_blank(line):
                break
            if classify(line) is Marker.COMMENT:
                continue
            lines.append(line + "\n")
        return Paragraph("".join(lines))
