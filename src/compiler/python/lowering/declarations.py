"""Struct, field and mixin lowering."""

from __future__ import annotations

from ..classifier import Line, classify_fields
from ..context import INDENT_WIDTH, MixinFrame, StructFrame
from ..discovery import scan_braces
from ..session import Declaration
from ..types import translate_type


class DeclarationsMixin:

    def _lower_shared(self, line: Line, indent: str):
        s = self.session
        if s.config.keep_comments:
            self._emit(indent, f"// shared {line.name} (elided)")
        # A mixin closed on its own line leaves nothing to track
        _depth, closed_at = scan_braces(line.value, 1)
        if closed_at is None:
            s.tracker.push(MixinFrame(name=line.name))

    def _lower_struct(self, line: Line, indent: str):
        s = self.session
        attrs = s.pending.consume(line.attributes)
        decl = Declaration("struct", line.name, line.line, detail=attrs)
        s.declarations.append(decl)
        self._emit(indent, f"typedef struct {line.name} {{")
        frame = StructFrame(name=line.name, attributes=attrs, declaration=decl)

        if line.opens or line.body is None:
            s.tracker.push(frame)
            return

        # struct Point { x: i32, y: i32 }
        field_indent = indent + " " * INDENT_WIDTH
        for field in classify_fields(line.body, line.line):
            self._emit_field(field, field_indent, decl)
        decl.end_line = line.line
        frame.close(s, indent)

    def _lower_field(self, line: Line, indent: str):
        frame = self.session.tracker.top
        if isinstance(frame, StructFrame):
            for field in classify_fields(line.text, line.line):
                self._emit_field(field, indent, frame.declaration)
            return
        self._lower_statement(line, indent)

    def _lower_use(self, line: Line, indent: str):
        s = self.session
        mixin = s.registry.get(line.name)
        if mixin is None:
            s.warning(f"unknown mixin '{line.name}'")
            self._emit(indent, line.text)
            return

        frame = s.tracker.top
        owner = frame.declaration if isinstance(frame, StructFrame) else None
        for raw in mixin.body:
            for field in classify_fields(raw):
                self._emit_field(field, indent, owner, source=mixin.name)

    def _emit_field(self, field: Line, indent: str,
                    owner: Declaration | None, source: str = ""):
        c_type = translate_type(field.type)
        self._emit(indent, f"{c_type} {field.name};")
        if owner is not None:
            detail = f"{c_type} (from {source})" if source else c_type
            owner.children.append(
                Declaration("field", field.name, self.session.current_line,
                            self.session.current_line, detail))
