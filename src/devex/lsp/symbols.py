"""Document symbol provider for Onyx.

Turns the declarations recorded during translation (plus the discovered
mixins) into a DocumentSymbol hierarchy for the Outline view.
"""

from __future__ import annotations

from lsprotocol import types as lsp

from src.compiler.python.classifier import classify_fields
from src.compiler.python.discovery import MixinDefinition
from src.compiler.python.session import Declaration
from src.devex.lsp.diagnostics import AnalysisResult


_KINDS = {
    "struct": lsp.SymbolKind.Struct,
    "field": lsp.SymbolKind.Field,
    "mixin": lsp.SymbolKind.Interface,
    "resolve": lsp.SymbolKind.Namespace,
    "function": lsp.SymbolKind.Function,
}


def _line_range(start_line: int, end_line: int, source_lines: list[str]) -> lsp.Range:
    """Range from the start of start_line to the end of end_line (1-based)."""
    start = max(0, start_line - 1)
    end = max(start, end_line - 1)
    end_col = len(source_lines[end]) if end < len(source_lines) else 0
    return lsp.Range(
        start=lsp.Position(line=start, character=0),
        end=lsp.Position(line=end, character=end_col),
    )


def _selection_range(name: str, line: int, source_lines: list[str]) -> lsp.Range:
    """Selection range: the first occurrence of the name on its line."""
    line_idx = max(0, line - 1)
    text = source_lines[line_idx] if line_idx < len(source_lines) else ""
    col = max(0, text.find(name))
    return lsp.Range(
        start=lsp.Position(line=line_idx, character=col),
        end=lsp.Position(line=line_idx, character=col + len(name)),
    )


def _symbol(decl: Declaration, source_lines: list[str], resolve_type: str = "") -> lsp.DocumentSymbol:
    kind = _KINDS[decl.kind]
    written = decl.name
    if resolve_type and decl.kind == "function":
        # Shown as Type_name, selected as the name written in source
        kind = lsp.SymbolKind.Method
        written = decl.name[len(resolve_type) + 1:]

    owner = decl.name if decl.kind == "resolve" else ""
    children = [_symbol(child, source_lines, owner) for child in decl.children]
    return lsp.DocumentSymbol(
        name=decl.name,
        kind=kind,
        range=_line_range(decl.line, decl.end_line or decl.line, source_lines),
        selection_range=_selection_range(written, decl.line, source_lines),
        detail=decl.detail,
        children=children,
    )


def _mixin_declaration(mixin: MixinDefinition) -> Declaration:
    decl = Declaration("mixin", mixin.name, mixin.line, mixin.end_line)
    single_line = mixin.line == mixin.end_line
    for offset, raw in enumerate(mixin.body, 1):
        line_no = mixin.line if single_line else mixin.line + offset
        for field in classify_fields(raw):
            decl.children.append(Declaration("field", field.name, line_no, line_no, field.type))
    return decl


def get_document_symbols(result: AnalysisResult) -> list[lsp.DocumentSymbol]:
    """Extract document symbols from the translation session."""
    if not result.session:
        return []

    source_lines = result.source.split("\n")
    decls = [_mixin_declaration(m) for m in result.session.registry]
    decls.extend(result.session.declarations)
    decls.sort(key=lambda d: d.line)
    return [_symbol(decl, source_lines) for decl in decls]
