"""Resolve blocks and function signatures.

    resolve Vec {                       // resolve Vec
        fn len(self: Vec) -> f32 {      float Vec_len(Vec* self) {
"""

from __future__ import annotations
import re

from ..classifier import Line
from ..context import FunctionFrame, ResolveFrame
from ..session import Declaration
from ..types import translate_type


_PARAM_RE = re.compile(r"(\w+)\s*:\s*([\w*]+)")


class FunctionsMixin:

    def _lower_resolve(self, line: Line, indent: str):
        s = self.session
        decl = Declaration("resolve", line.name, line.line)
        s.declarations.append(decl)
        self._emit(indent, f"// resolve {line.name}")
        if line.opens:
            s.tracker.push(ResolveFrame(type_name=line.name, declaration=decl))
            return
        decl.end_line = line.line
        self._emit(indent, "// end resolve")

    def _lower_function(self, line: Line, indent: str):
        s = self.session
        resolve = s.tracker.current_resolve()
        is_definition = line.opens or line.body is not None
        # Declarations keep only their own attributes; pending ones wait for a definition
        attrs = s.pending.consume(line.attributes) if is_definition else line.attributes

        name = line.name
        params: list[str] = []
        bindings: list[tuple[str, str]] = []
        if resolve is not None:
            name = f"{resolve.type_name}_{name}"
            params.append(f"{resolve.type_name}* self")
            bindings.append(("self", resolve.type_name))

        for param in line.params.split(","):
            m = _PARAM_RE.search(param)
            if m is None:
                continue
            param_name, param_type = m.groups()
            if resolve is not None and param_name == "self":
                continue
            params.append(f"{translate_type(param_type)} {param_name}")
            bindings.append((param_name, param_type))

        sig = ""
        if attrs:
            sig += f"__attribute__(({attrs})) "
        if line.modifier:
            sig += line.modifier + " "
        sig += f"{translate_type(line.type)} {name}({', '.join(params)})"

        decl = Declaration("function", name, line.line, line.line, detail=sig)
        owner = s.tracker.structural()
        if owner is not None and owner.declaration is not None:
            owner.declaration.children.append(decl)
        else:
            s.declarations.append(decl)

        if not is_definition:
            self._emit(indent, sig + ";")
            return

        s.symbols.push_scope()
        for param_name, param_type in bindings:
            s.symbols.define(param_name, param_type)

        if line.opens:
            self._emit(indent, sig + " {")
            s.tracker.push(FunctionFrame(declaration=decl))
            return

        # fn answer() -> i32 { return 42 }
        body = self._terminate(self._rewrite(line.body))
        s.symbols.pop_scope()
        self._emit(indent, f"{sig} {{ {body} }}" if body else f"{sig} {{ }}")
