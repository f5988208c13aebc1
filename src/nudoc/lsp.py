"""Minimal LSP server for NuDoc, diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from nudoc import __version__
from nudoc.errors import ParseError
from nudoc.parser import parse_string

server = LanguageServer(
    "nudoc-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _diagnostic(exc: ParseError) -> Diagnostic:
    """Convert a 1-based ParseError position into a 0-based LSP range."""
    line = exc.position.line - 1
    col = exc.position.column - 1
    return Diagnostic(
        range=Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + exc.width),
        ),
        message=exc.message,
        severity=DiagnosticSeverity.Error,
        code=exc.kind.value,
        source="nudoc",
    )


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    diagnostics: list[Diagnostic] = []

    try:
        parse_string(doc.source)
    except ParseError as exc:
        diagnostics.append(_diagnostic(exc))

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
