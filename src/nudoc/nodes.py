"""Node types for NuDoc parsed documents."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True, slots=True)
class Topic:
    """Section heading."""

    text: str


@dataclass(frozen=True, slots=True)
class Link:
    url: str
    label: str


@dataclass(frozen=True, slots=True)
class List:
    """Bullet list; title is None when the list opens with an item line."""

    title: str | None
    items: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class PreformattedTextBlock:
    """Fenced verbatim block. Each content line ends with a newline."""

    content: str
    content_type: str | None = None
    legend: str | None = None


@dataclass(frozen=True, slots=True)
class PreformattedTextLine:
    content: str


@dataclass(frozen=True, slots=True)
class Paragraph:
    """Default block. Each accumulated line ends with a newline."""

    text: str


@dataclass(frozen=True, slots=True)
class Alternative:
    """Alt-text block; continuation lines are joined with newlines."""

    text: str


Node: TypeAlias = (
    Topic
    | Link
    | List
    | PreformattedTextBlock
    | PreformattedTextLine
    | Paragraph
    | Alternative
)


@dataclass(frozen=True, slots=True)
class Header:
    name: str
    desc: str
    slug: str
    date: datetime.date
    tags: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Body:
    nodes: tuple[Node, ...] = ()


@dataclass(frozen=True, slots=True)
class Document:
    """Root document: header metadata plus body nodes in reading order."""

    header: Header
    body: Body
