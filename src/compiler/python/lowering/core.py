"""Lowering core: per-line driver, block closing and dispatch by line kind."""

from __future__ import annotations
import logging

from ..classifier import Line, classify
from ..context import BlockFrame
from ..errors import TranslationError
from ..expressions import ExpressionRewriter, rewrite_self
from ..session import TranslationSession
from ..tokens import LineKind

logger = logging.getLogger("oxc")


_LOWERERS = {
    LineKind.INCLUDE: "_lower_include",
    LineKind.SHARED: "_lower_shared",
    LineKind.STRUCT: "_lower_struct",
    LineKind.USE: "_lower_use",
    LineKind.FIELD: "_lower_field",
    LineKind.RESOLVE: "_lower_resolve",
    LineKind.FUNCTION: "_lower_function",
    LineKind.VAR: "_lower_var",
    LineKind.ELSE_IF: "_lower_else_if",
    LineKind.IF: "_lower_if",
    LineKind.WHILE: "_lower_while",
    LineKind.LOOP: "_lower_loop",
    LineKind.STATEMENT: "_lower_statement",
}


class LoweringBase:
    def __init__(self, session: TranslationSession):
        self.session = session
        self.rewriter = ExpressionRewriter(session.symbols)

    def run(self, source: str):
        """Rewrite pass over the whole unit."""
        s = self.session
        s.begin_rewrite()
        for line_no, raw in enumerate(source.splitlines(), 1):
            s.current_line = line_no
            try:
                self.lower_line(raw, line_no)
            except TranslationError:
                raise
            except Exception as e:
                raise TranslationError(f"internal error: {e}", line_no, 1) from e
        self._finish()

    def lower_line(self, raw: str, line_no: int):
        s = self.session
        if s.native is not None:
            self._continue_native(raw)
            return

        line = classify(raw, line_no)
        if s.tracker.in_mixin():
            self._lower_in_mixin(line)
            return

        if line.tail:
            # if x { a = 1 } else {  →  `if x { a = 1 }`, then `else {`
            self.lower_line(line.text[:-len(line.tail)], line_no)
            self.lower_line(line.tail, line_no)
            return

        if line.kind == LineKind.BLANK:
            s.emitter.emit("")
            return
        if line.kind == LineKind.COMMENT:
            self._lower_comment(line)
            return
        if line.kind == LineKind.ATTRIBUTE:
            s.pending.add(line.value)
            return
        if line.kind == LineKind.NATIVE:
            self._open_native(line)
            return

        text = rewrite_self(line.text)
        if text != line.text:
            line = classify(text, line_no)

        indent = s.tracker.indent_for(line.closes)
        if line.closes and self._close_block(indent):
            return
        getattr(self, _LOWERERS[line.kind])(line, indent)

    # --- Blocks ---

    def _close_block(self, indent: str) -> bool:
        """Pop the innermost frame. True if its closing consumed the line."""
        s = self.session
        frame = s.tracker.pop()
        if frame is None:
            s.warning("unmatched '}'")
            logger.debug("line %d: unmatched '}'", s.current_line)
            return False
        if frame.declaration is not None:
            frame.declaration.end_line = s.current_line
        return frame.close(s, indent)

    def _lower_in_mixin(self, line: Line):
        """Mixin bodies are elided; only their braces are tracked."""
        s = self.session
        if line.closes:
            frame = s.tracker.pop()
            if frame is not None:
                frame.close(s, "")
        if line.opens:
            s.tracker.push(BlockFrame())

    def _finish(self):
        s = self.session
        if s.native is not None:
            s.warning("native block is never closed", s.native.line)
        if s.tracker.depth:
            s.warning(f"{s.tracker.depth} block(s) still open at end of file")
        if s.pending:
            logger.debug("discarding unused attributes: %s", s.pending.consume())

    # --- Helpers ---

    def _emit(self, indent: str, text: str):
        self.session.emitter.emit(indent + text)

    def _rewrite(self, text: str) -> str:
        result = self.rewriter.rewrite(text)
        if result.unresolved:
            self.session.warning(
                f"cannot resolve the type of '{result.unresolved}'; call left unexpanded")
            logger.debug("line %d: unresolved receiver %s",
                         self.session.current_line, result.unresolved)
        return result.text

    @staticmethod
    def _terminate(text: str) -> str:
        if text and not text.endswith(";"):
            return text + ";"
        return text
