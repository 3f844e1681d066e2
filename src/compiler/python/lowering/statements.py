"""Variable declarations, includes, comments and generic statements."""

from __future__ import annotations

from ..classifier import Line
from ..context import BlockFrame, InitializerFrame
from ..types import translate_type


class StatementsMixin:

    def _lower_var(self, line: Line, indent: str):
        s = self.session
        # Keep the Onyx spelling: dispatch looks for Type_method by this name
        s.symbols.define(line.name, line.type)

        text = f"{translate_type(line.type)} {line.name}"
        if line.modifier:
            text = f"{line.modifier} {text}"
        if line.value:
            text += " = " + self._rewrite(line.value)

        if line.opens:
            self._emit(indent, text)
            s.tracker.push(InitializerFrame())
            return
        self._emit(indent, text + ";")

    def _lower_include(self, line: Line, indent: str):
        self._emit("", f"#include {line.value}")

    def _lower_comment(self, line: Line):
        s = self.session
        if s.config.keep_comments:
            self._emit(s.tracker.indent_for(), "//" + line.value)

    def _lower_statement(self, line: Line, indent: str):
        tracker = self.session.tracker
        text = self._rewrite(line.text)
        if line.opens:
            tracker.push(BlockFrame())
        elif not line.closes and not isinstance(tracker.top, InitializerFrame):
            text = self._terminate(text)
        self._emit(indent, text)
