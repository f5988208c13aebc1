"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from nudoc.lsp import _validate
from tests.conftest import HEADER


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///post.nudoc") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="nudoc", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# Header errors
# ---------------------------------------------------------------------------


class TestHeaderErrors:
    def test_invalid_tag(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put(HEADER.replace("#a #b", "#a #B"))
        _validate(ls, "file:///post.nudoc")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "'B'" in d.message
        assert d.source == "nudoc"
        assert d.code == "invalid-tag"
        # Tags line is line 5 (1-based) -> 4; 'B' at column 11 -> character 10
        assert d.range.start.line == 4
        assert d.range.start.character == 10


# ---------------------------------------------------------------------------
# Body errors
# ---------------------------------------------------------------------------


class TestBodyErrors:
    def test_unterminated_list(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put(HEADER + "| List\n- a")
        _validate(ls, "file:///post.nudoc")

        diags = published[0].diagnostics
        assert len(diags) == 1
        assert diags[0].code == "unterminated-block"
        assert diags[0].range.start.line == 7


# ---------------------------------------------------------------------------
# Clean document -> empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put(HEADER + "# Hello\n\nSome body text.")
        _validate(ls, "file:///post.nudoc")

        assert len(published) == 1
        assert published[0].diagnostics == []


# ---------------------------------------------------------------------------
# Position conversion (1-based -> 0-based)
# ---------------------------------------------------------------------------


class TestPositionConversion:
    def test_first_line(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("Bogus: value\n")
        _validate(ls, "file:///post.nudoc")

        d = published[0].diagnostics[0]
        assert d.range.start.line == 0
        assert d.range.start.character == 0
        # Range covers the unknown key
        assert d.range.end.character == 5
