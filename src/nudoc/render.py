"""Renderers: convert a parsed Document to HTML, Markdown or canonical NuDoc text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from nudoc.header import KEY_DATE, KEY_DESC, KEY_NAME, KEY_SLUG, KEY_TAGS
from nudoc.markers import HEADER_SENTINEL, HEADER_SEPARATOR, TAG_DELIMITER, TAG_MARKER, Marker
from nudoc.nodes import (
    Alternative,
    Document,
    Header,
    Link,
    List,
    Node,
    Paragraph,
    PreformattedTextBlock,
    PreformattedTextLine,
    Topic,
)


class OutputFormat(Enum):
    HTML = "html"
    MARKDOWN = "markdown"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class HeaderTemplate:
    """How header fields are presented in HTML and Markdown output.

    ``tag_url`` is a link pattern where ``{tag}`` is replaced by the tag,
    e.g. ``/tags/{tag}.html``. Tags are not linked when it is None.
    """

    date_format: str = "%Y-%m-%d"
    tag_url: str | None = None


DEFAULT_TEMPLATE = HeaderTemplate()


def render(
    doc: Document,
    fmt: OutputFormat | str = OutputFormat.HTML,
    template: HeaderTemplate | None = None,
) -> str:
    """Render a parsed document in the requested output format."""
    fmt = OutputFormat(fmt)
    if template is None:
        template = DEFAULT_TEMPLATE

    match fmt:
        case OutputFormat.HTML:
            return render_html(doc, template)
        case OutputFormat.MARKDOWN:
            return render_markdown(doc, template)
        case OutputFormat.TEXT:
            return render_text(doc)
        case _:
            assert_never(fmt)


# ---------------------------------------------------------------------------
# Escaping
# ---------------------------------------------------------------------------


def _escape_html(text: str) -> str:
    """Escape text for HTML body content and attribute values."""
    result: list[str] = []
    for ch in text:
        if ch == "&":
            result.append("&amp;")
        elif ch == "<":
            result.append("&lt;")
        elif ch == ">":
            result.append("&gt;")
        elif ch == '"':
            result.append("&quot;")
        elif ch == "'":
            result.append("&#39;")
        else:
            result.append(ch)
    return "".join(result)


def _escape_md_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")


# Line starts Markdown would read as a heading, fence, quote, list, rule or table.
_MD_BLOCK_START = re.compile(r"([ \t]*)(?:([`~#>+*=|_-])|([0-9]+)([.)]))")


def _escape_md_line(line: str) -> str:
    """Backslash-escape a leading character that would start a Markdown block."""
    m = _MD_BLOCK_START.match(line)
    if m is None:
        return line
    indent, symbol, digits, delim = m.groups()
    rest = line[m.end() :]
    if symbol is not None:
        return f"{indent}\\{symbol}{rest}"
    return f"{indent}{digits}\\{delim}{rest}"


def _md_url(url: str) -> str:
    if any(ch in url for ch in " ()<>"):
        return "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
    return url


def _md_fence(content: str) -> str:
    """Shortest backtick fence longer than any backtick run in *content*."""
    longest = max((len(run) for run in re.findall(r"`+", content)), default=0)
    return "`" * max(3, longest + 1)


def _lines(text: str) -> list[str]:
    """Split newline-terminated text into lines without their terminators."""
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _tag_href(tag: str, template: HeaderTemplate) -> str | None:
    if template.tag_url is None:
        return None
    return template.tag_url.replace("{tag}", tag)


# ---------------------------------------------------------------------------
# Canonical text
# ---------------------------------------------------------------------------

_FENCE = Marker.PRE_FENCE.value


def to_text(node: Node) -> str:
    """Re-serialize a node in the grammar it was parsed from."""
    match node:
        case Topic(text):
            return f"{Marker.TOPIC.value}{text}\n"
        case Link(url, label):
            return f"{Marker.LINK.value}{url} {label}\n"
        case List(title, items):
            parts = [] if title is None else [f"{Marker.LIST_TITLE.value}{title}\n"]
            parts.extend(f"{Marker.LIST_ITEM.value}{item}\n" for item in items)
            # A list is only closed by a blank line
            parts.append("\n")
            return "".join(parts)
        case PreformattedTextBlock(content, content_type, legend):
            parts = [f"{_FENCE}{content_type or ''}\n"]
            for line in _lines(content):
                # Escape content that would otherwise close the block
                parts.append(f"`{line}\n" if line.startswith(_FENCE) else f"{line}\n")
            parts.append(_FENCE if legend is None else f"{_FENCE} {legend}")
            parts.append("\n")
            return "".join(parts)
        case PreformattedTextLine(content):
            return f"{Marker.PRE_LINE.value}{content}\n"
        case Paragraph(text):
            return text if text.endswith("\n") else text + "\n"
        case Alternative(text):
            return "".join(f"{Marker.ALTERNATIVE.value}{line}\n" for line in text.split("\n"))
        case _:
            assert_never(node)


def header_to_text(header: Header) -> str:
    tags = TAG_DELIMITER.join(TAG_MARKER + tag for tag in header.tags)
    fields = (
        (KEY_NAME, header.name),
        (KEY_DESC, header.desc),
        (KEY_SLUG, header.slug),
        (KEY_DATE, header.date.isoformat()),
        (KEY_TAGS, tags),
    )
    lines = [f"{key}{HEADER_SEPARATOR}{value}\n" for key, value in fields]
    lines.append(HEADER_SENTINEL + "\n")
    return "".join(lines)


def render_text(doc: Document) -> str:
    """Render a document back to canonical NuDoc source."""
    parts: list[str] = [header_to_text(doc.header)]
    for node in doc.body.nodes:
        # Blank line between blocks, unless the block already ends with one
        if not parts[-1].endswith("\n\n"):
            parts.append("\n")
        parts.append(to_text(node))
    return "".join(parts)


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------


def to_markdown(node: Node) -> str:
    """Map a node to the nearest Markdown construct."""
    match node:
        case Topic(text):
            return f"## {text}\n"
        case Link(url, label):
            return f"[{_escape_md_label(label)}]({_md_url(url)})\n"
        case List(title, items):
            parts = [] if title is None else [f"{_escape_md_line(title)}\n"]
            parts.extend(f"- {item}\n" for item in items)
            return "".join(parts)
        case PreformattedTextBlock(content, content_type, legend):
            fence = _md_fence(content)
            body = content if not content or content.endswith("\n") else content + "\n"
            result = f"{fence}{content_type or ''}\n{body}{fence}\n"
            if legend is not None:
                result += f"\n*{legend}*\n"
            return result
        case PreformattedTextLine(content):
            fence = _md_fence(content)
            return f"{fence}\n{content}\n{fence}\n"
        case Paragraph(text):
            return "".join(_escape_md_line(line) + "\n" for line in _lines(text))
        case Alternative(text):
            return "".join(
                f"> {_escape_md_line(line)}\n" if line else ">\n" for line in text.split("\n")
            )
        case _:
            assert_never(node)


def header_to_markdown(header: Header, template: HeaderTemplate) -> str:
    tags: list[str] = []
    for tag in header.tags:
        href = _tag_href(tag, template)
        tags.append(f"{TAG_MARKER}{tag}" if href is None else f"[{TAG_MARKER}{tag}]({_md_url(href)})")

    parts = [f"# {header.name}\n", "\n", f"{header.desc}\n", "\n"]
    parts.append(f"{header.date.strftime(template.date_format)}\n")
    if tags:
        parts.append("\n")
        parts.append(" ".join(tags) + "\n")
    return "".join(parts)


def render_markdown(doc: Document, template: HeaderTemplate = DEFAULT_TEMPLATE) -> str:
    """Render a document as Markdown text."""
    parts: list[str] = [header_to_markdown(doc.header, template)]
    for node in doc.body.nodes:
        parts.append("\n")
        parts.append(to_markdown(node))
    return "".join(parts)


# ---------------------------------------------------------------------------
# HTML
# ---------------------------------------------------------------------------


def to_html(node: Node) -> str:
    """Render a node to an HTML fragment. All node text is escaped."""
    match node:
        case Topic(text):
            return f"<h2>{_escape_html(text)}</h2>"
        case Link(url, label):
            return f'<p><a href="{_escape_html(url)}">{_escape_html(label)}</a></p>'
        case List(title, items):
            return _render_list(title, items)
        case PreformattedTextBlock(content, content_type, legend):
            return _render_pre_block(content, content_type, legend)
        case PreformattedTextLine(content):
            return f"<pre>{_escape_html(content)}</pre>"
        case Paragraph(text):
            return f"<p>{_escape_html(text.rstrip())}</p>"
        case Alternative(text):
            return f'<p class="alternative">{_escape_html(text)}</p>'
        case _:
            assert_never(node)


def _render_list(title: str | None, items: tuple[str, ...]) -> str:
    parts: list[str] = []
    if title is not None:
        parts.append(f'<p class="list-title">{_escape_html(title)}</p>\n')
    parts.append("<ul>\n")
    for item in items:
        parts.append(f"<li>{_escape_html(item)}</li>\n")
    parts.append("</ul>")
    return "".join(parts)


def _render_pre_block(content: str, content_type: str | None, legend: str | None) -> str:
    cls = f' class="language-{_escape_html(content_type)}"' if content_type else ""
    label = f' aria-label="{_escape_html(legend)}"' if legend else ""

    parts = ['<figure class="pre-block">\n']
    parts.append(f"<pre{label}><code{cls}>{_escape_html(content)}</code></pre>\n")
    if legend:
        parts.append(f"<figcaption>{_escape_html(legend)}</figcaption>\n")
    parts.append("</figure>")
    return "".join(parts)


def header_to_html(header: Header, template: HeaderTemplate) -> str:
    parts: list[str] = ["<header>\n"]

    if header.tags:
        parts.append('<ul class="tags">\n')
        for tag in header.tags:
            text = _escape_html(TAG_MARKER + tag)
            href = _tag_href(tag, template)
            if href is None:
                parts.append(f"<li>{text}</li>\n")
            else:
                parts.append(f'<li><a href="{_escape_html(href)}">{text}</a></li>\n')
        parts.append("</ul>\n")

    iso = header.date.isoformat()
    shown = header.date.strftime(template.date_format)
    parts.append(f'<time datetime="{iso}">{_escape_html(shown)}</time>\n')
    parts.append(f"<h1>{_escape_html(header.name)}</h1>\n")
    parts.append(f'<p class="description">{_escape_html(header.desc)}</p>\n')
    parts.append("</header>\n")
    return "".join(parts)


def render_html(doc: Document, template: HeaderTemplate = DEFAULT_TEMPLATE) -> str:
    """Render a document to an HTML fragment for an external page template."""
    parts: list[str] = [header_to_html(doc.header, template)]
    for node in doc.body.nodes:
        parts.append(to_html(node))
        parts.append("\n")
    return "".join(parts)
