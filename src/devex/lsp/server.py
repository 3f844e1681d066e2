#!/usr/bin/env python3
"""oxc Language Server.

Provides diagnostics and document symbols for .ox files by running the
transpiler on the open buffer.
"""

import sys
import logging

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from src.compiler.python import __version__
from src.devex.lsp.diagnostics import AnalysisResult, compute_diagnostics
from src.devex.lsp.symbols import get_document_symbols

logger = logging.getLogger("oxc-lsp")

server = LanguageServer("oxc-lsp", __version__)

# Cache: uri -> latest AnalysisResult
_analysis_cache: dict[str, AnalysisResult] = {}


def _publish(uri: str, diagnostics: list[lsp.Diagnostic]):
    server.text_document_publish_diagnostics(
        lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


def _refresh(uri: str, source: str | None = None):
    """Re-translate a document (from the workspace copy unless given) and publish."""
    if source is None:
        source = server.workspace.get_text_document(uri).source
    result = compute_diagnostics(uri, source)
    _analysis_cache[uri] = result
    logger.debug("%s: %d diagnostic(s)", uri, len(result.diagnostics))
    _publish(uri, result.diagnostics)


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: lsp.DidOpenTextDocumentParams):
    _refresh(params.text_document.uri, params.text_document.text)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: lsp.DidChangeTextDocumentParams):
    _refresh(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_SAVE)
def did_save(params: lsp.DidSaveTextDocumentParams):
    _refresh(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(params: lsp.DidCloseTextDocumentParams):
    _analysis_cache.pop(params.text_document.uri, None)
    _publish(params.text_document.uri, [])


@server.feature(lsp.TEXT_DOCUMENT_DOCUMENT_SYMBOL)
def document_symbol(params: lsp.DocumentSymbolParams):
    result = _analysis_cache.get(params.text_document.uri)
    if result is None:
        return []
    return get_document_symbols(result)


def start():
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    server.start_io()


if __name__ == "__main__":
    start()
