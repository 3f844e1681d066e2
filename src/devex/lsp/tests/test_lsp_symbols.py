"""Tests for the LSP document outline."""

import textwrap

from lsprotocol import types as lsp

from src.devex.lsp.diagnostics import AnalysisResult, compute_diagnostics
from src.devex.lsp.symbols import get_document_symbols


def symbols(source: str) -> list[lsp.DocumentSymbol]:
    return get_document_symbols(compute_diagnostics("file:///t.ox", textwrap.dedent(source)))


SOURCE = """\
    shared Pos {
        x: i32
        y: i32
    }
    struct P {
        use Pos
        id: u32
    }
    resolve P {
        fn move_by(dx: i32) -> void {
        }
    }
    fn main() -> i32 {
        return 0
    }
"""


class TestSymbols:
    def test_top_level_order_and_kinds(self):
        result = symbols(SOURCE)
        assert [(s.name, s.kind) for s in result] == [
            ("Pos", lsp.SymbolKind.Interface),
            ("P", lsp.SymbolKind.Struct),
            ("P", lsp.SymbolKind.Namespace),
            ("main", lsp.SymbolKind.Function),
        ]

    def test_mixin_fields(self):
        pos = symbols(SOURCE)[0]
        assert [(c.name, c.detail, c.range.start.line) for c in pos.children] == [
            ("x", "i32", 1),
            ("y", "i32", 2),
        ]
        assert pos.range.end.line == 3

    def test_struct_fields_include_mixin(self):
        struct = symbols(SOURCE)[1]
        assert [(c.name, c.detail) for c in struct.children] == [
            ("x", "int (from Pos)"),
            ("y", "int (from Pos)"),
            ("id", "uint32_t"),
        ]
        assert struct.range.start.line == 4
        assert struct.range.end.line == 7

    def test_resolve_methods(self):
        resolve = symbols(SOURCE)[2]
        [method] = resolve.children
        assert method.name == "P_move_by"
        assert method.kind == lsp.SymbolKind.Method
        assert method.detail == "void P_move_by(P* self, int dx)"
        # Selection covers the name as written
        assert method.selection_range.start.line == 9
        assert method.selection_range.start.character == 7
        assert method.selection_range.end.character == 14

    def test_function_range(self):
        main = symbols(SOURCE)[3]
        assert main.detail == "int main()"
        assert (main.range.start.line, main.range.end.line) == (12, 14)

    def test_no_session(self):
        assert get_document_symbols(AnalysisResult(uri="file:///t.ox", source="")) == []
