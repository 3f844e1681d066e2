"""Tests for Onyx → C lowering."""

import textwrap

import pytest

from src.compiler.python.errors import TranslationError
from src.compiler.python.lowering.statements import StatementsMixin
from src.compiler.python.session import TranspilerConfig
from src.compiler.python.transpiler import Transpiler


def generate(source: str, **config) -> str:
    return Transpiler(TranspilerConfig(**config)).translate(textwrap.dedent(source), "test.ox")


def body(source: str, **config) -> list[str]:
    """Generated lines without the header."""
    return generate(source, **config).split("\n")[1:-1]


def assert_contains(source: str, *fragments: str):
    """Assert that generated C code contains all given fragments."""
    output = generate(source)
    for frag in fragments:
        assert frag in output, f"Expected '{frag}' in output:\n{output}"


def assert_not_contains(source: str, *fragments: str):
    output = generate(source)
    for frag in fragments:
        assert frag not in output, f"Did not expect '{frag}' in output:\n{output}"


def session(source: str, **config):
    return Transpiler(TranspilerConfig(**config)).run(textwrap.dedent(source), "test.ox")


# --- Output shape ---

class TestOutput:
    def test_header(self):
        assert generate("var x: i32").startswith("// transpiled from test.ox\n")

    def test_header_uses_basename(self):
        out = Transpiler().translate("var x: i32", "some/dir/main.ox")
        assert out.split("\n")[0] == "// transpiled from main.ox"

    def test_trailing_newline(self):
        assert generate("var x: i32").endswith("x;\n")

    def test_blank_lines_kept_at_top_level_and_in_blocks(self):
        # Top-level blank lines are kept too, not only those inside blocks
        src = "var a: i32\n\nfn f() -> void {\n\n}\n"
        assert body(src) == ["int a;", "", "void f() {", "", "}"]


# --- Structs ---

class TestStructs:
    def test_struct_fields(self):
        src = """\
            struct S {
                a: i32
                b: ptr
            }
        """
        assert body(src) == ["typedef struct S {", "    int a;", "    void* b;", "} S;"]

    def test_fields_on_one_line(self):
        src = """\
            struct S {
                a: i32  b: ptr
            }
        """
        assert body(src) == ["typedef struct S {", "    int a;", "    void* b;", "} S;"]

    def test_single_line_struct(self):
        assert body("struct P { x: i32, y: i32 }") == [
            "typedef struct P {", "    int x;", "    int y;", "} P;",
        ]

    def test_pointer_field(self):
        assert_contains("struct N {\n    next: N*\n}\n", "    N* next;")

    def test_pending_attributes_merge(self):
        src = """\
            @[packed]
            @[aligned(4)]
            struct A {
                x: u8
            }
            struct B {
                y: u8
            }
        """
        out = generate(src)
        assert "} A __attribute__((packed, aligned(4)));" in out
        assert "} B;" in out

    def test_pending_then_inline(self):
        src = """\
            @[packed]
            @[aligned(8)] struct A {
            }
        """
        assert_contains(src, "} A __attribute__((packed, aligned(8)));")

    def test_attribute_lines_emit_nothing(self):
        assert body("@[packed]\nstruct A {\n}\n") == [
            "typedef struct A {", "} A __attribute__((packed));",
        ]

    def test_field_outside_struct_is_statement(self):
        assert body("label: i32") == ["label: i32;"]


# --- Mixins ---

class TestMixins:
    def test_use_injects_fields(self):
        src = """\
            shared Pos {
                x: i32
                y: i32
            }
            struct P {
                use Pos
                id: u32
            }
        """
        assert body(src) == [
            "// shared Pos (elided)",
            "typedef struct P {",
            "    int x;",
            "    int y;",
            "    uint32_t id;",
            "} P;",
        ]

    def test_use_before_definition(self):
        src = """\
            struct P {
                use M
            }
            shared M { x: i32 }
        """
        assert_contains(src, "    int x;\n} P;")

    def test_use_has_no_depth_change(self):
        src = """\
            shared M { x: i32 }
            struct P {
                use M
            }
        """
        assert session(src).tracker.depth == 0

    def test_mixin_body_elided(self):
        src = """\
            shared M {
                x: i32
                fn f() -> void {
                    g()
                }
            }
        """
        assert body(src) == ["// shared M (elided)"]

    def test_mixin_non_field_lines_skipped_on_use(self):
        src = """\
            shared M {
                x: i32
                fn f(a: i32) -> void {
                }
            }
            struct S {
                use M
            }
        """
        assert_not_contains(src, "int a;")

    def test_mixin_marker_stripped_with_comments(self):
        src = "shared M { x: i32 }\n"
        assert body(src, keep_comments=False) == []

    def test_unknown_mixin(self):
        s = session("struct S {\n    use Nope\n}\n")
        assert "    use Nope" in s.render()
        assert any("unknown mixin 'Nope'" in w for w in s.warnings)


# --- Resolve blocks and functions ---

class TestResolve:
    SOURCE = """\
        struct V {
            x: i32
        }
        resolve V {
            fn set(x: i32, y: i32) -> void {
                self.x = x
            }
        }
        fn main() -> i32 {
            var v: V
            v.set(10, 20)
            return 0
        }
    """

    def test_full_output(self):
        assert body(self.SOURCE) == [
            "typedef struct V {",
            "    int x;",
            "} V;",
            "// resolve V",
            "void V_set(V* self, int x, int y) {",
            "    self->x = x;",
            "}",
            "// end resolve",
            "int main() {",
            "    V v;",
            "    V_set(&v, 10, 20);",
            "    return 0;",
            "}",
        ]

    def test_explicit_self_elided(self):
        src = """\
            resolve Vec {
                fn len(self: Vec) -> f32 {
                }
            }
        """
        assert_contains(src, "float Vec_len(Vec* self) {")

    def test_pipe_inside_resolve_function(self):
        src = """\
            resolve Vec {
                fn twice(n: i32) -> i32 {
                    return n |> Vec_scale(_, 2)
                }
            }
        """
        assert_contains(src, "    return Vec_scale(n, 2);")

    def test_single_line_resolve(self):
        assert body("resolve V { }") == ["// resolve V", "// end resolve"]

    def test_scope_closed_after_resolve(self):
        s = session(self.SOURCE)
        assert s.symbols.depth == 1
        assert s.symbols.lookup("self") is None


class TestFunctions:
    def test_definition(self):
        src = """\
            fn add(a: i32, b: i32) -> i32 {
                return a + b
            }
        """
        assert body(src) == ["int add(int a, int b) {", "    return a + b;", "}"]

    def test_declaration(self):
        assert body("extern fn puts(s: str) -> i32") == ["extern int puts(char* s);"]

    def test_single_line_definition(self):
        assert body("fn answer() -> i32 { return 42 }") == ["int answer() { return 42; }"]

    def test_pending_attribute_on_definition(self):
        assert_contains("@[hot]\nfn run() -> void {\n}\n", "__attribute__((hot)) void run() {")

    def test_declaration_leaves_pending_attributes(self):
        src = """\
            @[packed]
            fn f() -> void
            struct S {
            }
        """
        out = generate(src)
        assert "void f();" in out
        assert "} S __attribute__((packed));" in out

    def test_declaration_keeps_inline_attribute(self):
        assert body("@[noreturn] fn die() -> void") == ["__attribute__((noreturn)) void die();"]

    def test_modifier(self):
        assert_contains("static fn helper() -> void {\n}\n", "static void helper() {")

    def test_parameters_are_scoped(self):
        src = """\
            fn f(v: Vec) -> void {
                v.push(1)
            }
            fn g() -> void {
                v.push(1)
            }
        """
        out = generate(src)
        assert "Vec_push(&v, 1);" in out
        assert "v.push(1);" in out

    def test_pointer_parameter(self):
        src = """\
            fn f(v: Vec*) -> void {
                v.clear()
            }
        """
        assert_contains(src, "    Vec_clear(v);")


# --- Variables and statements ---

class TestVars:
    def test_initializer(self):
        assert body("var x: i32 = 5") == ["int x = 5;"]

    def test_trailing_semicolon_not_doubled(self):
        assert body("var x: i32 = 5;") == ["int x = 5;"]

    def test_modifier(self):
        assert body("var const n: u32 = 3") == ["const uint32_t n = 3;"]

    def test_unknown_type(self):
        assert body("var s: Sprite") == ["Sprite s;"]

    def test_pointer_type(self):
        assert body("var p: u8** = 0") == ["uint8_t** p = 0;"]

    def test_block_initializer(self):
        src = """\
            var p: Point = {
                .x = 1,
                .y = 2
            };
        """
        assert body(src) == ["Point p = {", "    .x = 1,", "    .y = 2", "};"]

    def test_initializer_pipe(self):
        assert body("var r: i32 = x |> f(1)") == ["int r = f(x, 1);"]


class TestStatements:
    def test_terminated(self):
        assert body("x = 1") == ["x = 1;"]

    def test_existing_semicolon(self):
        assert body("x = 1;") == ["x = 1;"]

    def test_unresolved_receiver_left_unexpanded(self):
        s = session("q.go(1)")
        assert s.render().split("\n")[1] == "q.go(1);"
        assert s.warnings == ["cannot resolve the type of 'q'; call left unexpanded at 1:1"]

    def test_stray_close_brace(self):
        s = session("}")
        assert s.render().split("\n")[1] == "}"
        assert s.warnings == ["unmatched '}' at 1:1"]

    def test_generic_block(self):
        src = """\
            fn f() -> void {
                {
                    x = 1
                }
            }
        """
        assert body(src) == ["void f() {", "    {", "        x = 1;", "    }", "}"]


# --- Control flow ---

class TestControlFlow:
    def test_while_and_if_chain(self):
        src = """\
            fn main() -> i32 {
                var i: i32 = 0
                while i < 10 {
                    i += 1
                }
                if (i == 10) {
                    i = 0
                } else if i > 10 {
                    i = 1
                } else {
                    i = 2
                }
                return i
            }
        """
        assert body(src) == [
            "int main() {",
            "    int i = 0;",
            "    while (i < 10) {",
            "        i += 1;",
            "    }",
            "    if (i == 10) {",
            "        i = 0;",
            "    } else if (i > 10) {",
            "        i = 1;",
            "    } else {",
            "        i = 2;",
            "    }",
            "    return i;",
            "}",
        ]

    def test_loop(self):
        assert body("loop {\n    break\n}\n") == ["while (1) {", "    break;", "}"]

    def test_single_line_if(self):
        assert body("if x > 0 { y = 1 }") == ["if (x > 0) { y = 1; }"]

    def test_condition_rewritten(self):
        src = """\
            fn f(v: Vec) -> void {
                if v.empty() {
                }
            }
        """
        assert_contains(src, "    if (Vec_empty(&v)) {")

    def test_balanced_depth(self):
        src = """\
            fn f() -> void {
                loop {
                    if a {
                    }
                }
            }
        """
        assert session(src).tracker.depth == 0


# --- Native, comments, includes ---

class TestNative:
    def test_native_block(self):
        src = """\
            fn main() -> i32 {
                native {
                    printf("%d\\n", 1);
                    if (x) { y(); }
                }
                return 0
            }
        """
        assert body(src) == [
            "int main() {",
            '    printf("%d\\n", 1);',
            "    if (x) { y(); }",
            "    return 0;",
            "}",
        ]

    def test_native_lines_not_rewritten(self):
        src = """\
            native {
                # not a comment
                var x: i32
            }
        """
        assert body(src) == ["# not a comment", "var x: i32"]

    def test_single_line_native(self):
        assert body("native { foo(); }") == ["foo();"]

    def test_nested_braces_end_on_balance(self):
        src = """\
            native {
                {
                }
            }
            x = 1
        """
        assert body(src) == ["{", "}", "x = 1;"]

    def test_unclosed_native_warns(self):
        s = session("native {\n    f();\n")
        assert s.warnings == ["native block is never closed at 1:1"]


class TestCommentsAndIncludes:
    def test_comment(self):
        assert body("# hello") == ["// hello"]

    def test_comment_indented(self):
        assert_contains("fn f() -> void {\n    # inside\n}\n", "    // inside")

    def test_strip_comments(self):
        assert body("# hello\nvar x: i32\n", keep_comments=False) == ["int x;"]

    def test_include_quoted(self):
        assert body('@include "vec.h"') == ['#include "vec.h"']

    def test_include_angle(self):
        assert body("@include <stdio.h>") == ["#include <stdio.h>"]


# --- Failures ---

class TestFailures:
    def test_unclosed_block_warns(self):
        s = session("fn f() -> void {\n")
        assert s.warnings == ["1 block(s) still open at end of file at 1:1"]

    def test_internal_error_carries_line(self, monkeypatch):
        def boom(self, line, indent):
            raise RuntimeError("boom")

        monkeypatch.setattr(StatementsMixin, "_lower_var", boom)
        with pytest.raises(TranslationError) as exc_info:
            generate("x = 1\nvar y: i32\n")
        assert exc_info.value.line == 2
        assert exc_info.value.message == "internal error: boom"

    def test_sessions_are_independent(self):
        transpiler = Transpiler()
        transpiler.translate("var v: Vec\n", "a.ox")
        out = transpiler.translate("v.len()\n", "b.ox")
        assert "v.len();" in out


class TestTrailingText:
    def test_else_after_single_line_if(self):
        src = """\
            fn m() -> void {
                if x { a = 1 } else {
                    b = 2
                }
            }
        """
        assert body(src) == [
            "void m() {",
            "    if (x) { a = 1; }",
            "    else {",
            "        b = 2;",
            "    }",
            "}",
        ]

    def test_else_if_chain_on_one_line(self):
        src = """\
            if x { a = 1 } else if y { a = 2 } else {
                a = 3
            }
        """
        assert body(src) == [
            "if (x) { a = 1; }",
            "else if (y) { a = 2; }",
            "else {",
            "    a = 3;",
            "}",
        ]

    def test_text_after_single_line_loop(self):
        assert body("loop { step() } done()") == ["while (1) { step(); }", "done();"]

    def test_depth_balanced(self):
        src = "fn m() -> void {\n    if x { a = 1 } else {\n    }\n}\n"
        assert session(src).tracker.depth == 0
