"""Shared test fixtures and helpers."""

from __future__ import annotations

import datetime

import pytest

from nudoc.errors import ErrorKind, ParseError
from nudoc.nodes import Body, Document, Header, Node
from nudoc.parser import parse_string

HEADER = (
    "Name: X\n"
    "Description: Y\n"
    "Slug: z\n"
    "Date: 2024-01-01\n"
    "Tags: #a #b\n"
    "---\n"
)

# Line number of the first body line after HEADER
BODY_START = 7

HEADER_VALUE = Header(
    name="X",
    desc="Y",
    slug="z",
    date=datetime.date(2024, 1, 1),
    tags=("a", "b"),
)


@pytest.fixture
def parse_source():
    """Return a helper that parses a complete source string into a Document."""

    def _parse(source: str) -> Document:
        return parse_string(source)

    return _parse


@pytest.fixture
def parse_nodes():
    """Return a helper that parses body source (after a valid header) into nodes."""

    def _parse(body: str) -> tuple[Node, ...]:
        return parse_string(HEADER + body).body.nodes

    return _parse


def make_doc(*nodes: Node, header: Header = HEADER_VALUE) -> Document:
    """Build a Document directly from nodes."""
    return Document(header, Body(nodes))


def assert_parse_error(source: str, kind: ErrorKind, line: int | None = None) -> ParseError:
    """Assert that parsing fails with the given kind (and line), returning the error."""
    with pytest.raises(ParseError) as exc_info:
        parse_string(source)
    err = exc_info.value
    assert err.kind == kind, f"Expected {kind}, got {err.kind}: {err.message}"
    if line is not None:
        assert err.line == line, f"Expected line {line}, got {err.line}"
    return err
