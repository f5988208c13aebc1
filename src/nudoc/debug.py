"""--debug node dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO, assert_never

from nudoc.nodes import (
    Alternative,
    Document,
    Link,
    List,
    Node,
    Paragraph,
    PreformattedTextBlock,
    PreformattedTextLine,
    Topic,
)


def dump_document(doc: Document, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable node listing to *file*."""
    header = doc.header
    file.write("Document\n")
    file.write(f"{_indent(1)}Header\n")
    file.write(f"{_indent(2)}Name({header.name!r})\n")
    file.write(f"{_indent(2)}Description({header.desc!r})\n")
    file.write(f"{_indent(2)}Slug({header.slug!r})\n")
    file.write(f"{_indent(2)}Date({header.date.isoformat()})\n")
    file.write(f"{_indent(2)}Tags({', '.join(header.tags)})\n")
    file.write(f"{_indent(1)}Body\n")
    for node in doc.body.nodes:
        _dump_node(node, 2, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_node(node: Node, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    match node:
        case Topic(text):
            f.write(f"{pad}Topic({text!r})\n")
        case Link(url, label):
            f.write(f"{pad}Link({url!r}, {label!r})\n")
        case List(title, items):
            f.write(f"{pad}List({title!r})\n")
            for item in items:
                f.write(f"{_indent(depth + 1)}Item({item!r})\n")
        case PreformattedTextBlock(content, content_type, legend):
            f.write(f"{pad}PreformattedTextBlock(type={content_type!r}, legend={legend!r})\n")
            f.write(f"{_indent(depth + 1)}{content!r}\n")
        case PreformattedTextLine(content):
            f.write(f"{pad}PreformattedTextLine({content!r})\n")
        case Paragraph(text):
            f.write(f"{pad}Paragraph({text!r})\n")
        case Alternative(text):
            f.write(f"{pad}Alternative({text!r})\n")
        case _:
            assert_never(node)
