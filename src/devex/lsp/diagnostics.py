"""Diagnostic computation for Onyx documents.

Runs the transpiler on the buffer text. A failed translation becomes one
error; every best-effort fallback the session recorded becomes a warning.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Optional

from lsprotocol import types as lsp
from pygls import uris

from src.compiler.python.errors import TranslationError
from src.compiler.python.session import TranslationSession, TranspilerConfig
from src.compiler.python.transpiler import Transpiler

# Session warnings are recorded as "message at line:col"
_LOCATED_RE = re.compile(r"^(.+) at (\d+):(\d+)$")
_WORD_RE = re.compile(r"[\w.>-]+|\S")


@dataclass
class AnalysisResult:
    """Latest translation of a document."""

    uri: str
    source: str
    diagnostics: list[lsp.Diagnostic] = field(default_factory=list)
    session: Optional[TranslationSession] = None


def document_name(uri: str) -> str:
    """File name used in the generated header for a document URI."""
    return os.path.basename(uris.to_fs_path(uri) or uri)


def _span(source_lines: list[str], line: int, col: int) -> lsp.Range:
    """Range of the word starting at a 1-based line/col."""
    line_0 = max(0, line - 1)
    col_0 = max(0, col - 1)
    text = source_lines[line_0] if line_0 < len(source_lines) else ""
    # Warnings point at column 1; start at the first non-blank character instead
    if col_0 < len(text) and text[col_0].isspace():
        col_0 = len(text) - len(text.lstrip())
    m = _WORD_RE.match(text, col_0)
    end = m.end() if m else col_0 + 1
    return lsp.Range(
        start=lsp.Position(line=line_0, character=col_0),
        end=lsp.Position(line=line_0, character=end),
    )


def _located(source_lines: list[str], text: str,
             severity: lsp.DiagnosticSeverity) -> lsp.Diagnostic:
    m = _LOCATED_RE.match(text)
    message, line, col = (m.group(1), int(m.group(2)), int(m.group(3))) if m else (text, 1, 1)
    return lsp.Diagnostic(
        range=_span(source_lines, line, col),
        message=message,
        severity=severity,
        source="oxc",
    )


def compute_diagnostics(uri: str, source: str) -> AnalysisResult:
    """Translate the document and collect its diagnostics."""
    result = AnalysisResult(uri=uri, source=source)
    source_lines = source.split("\n")

    try:
        session = Transpiler(TranspilerConfig()).run(source, document_name(uri))
    except TranslationError as e:
        result.diagnostics.append(_located(source_lines, str(e), lsp.DiagnosticSeverity.Error))
        return result

    result.session = session
    result.diagnostics = [
        _located(source_lines, warn, lsp.DiagnosticSeverity.Warning)
        for warn in session.warnings
    ]
    return result
