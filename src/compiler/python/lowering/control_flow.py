"""Control flow lowering: if, else if, while, loop."""

from __future__ import annotations

from ..classifier import Line
from ..context import BlockFrame


def strip_outer_parens(cond: str) -> str:
    """Drop one pair of parentheses wrapping the whole condition.

    The caller already wraps in parens, so `if (x > 0) {` stays
    `if (x > 0) {` rather than `if ((x > 0)) {`.
    """
    if cond.startswith('(') and cond.endswith(')'):
        depth = 0
        for i, ch in enumerate(cond):
            if ch == '(':
                depth += 1
            elif ch == ')':
                depth -= 1
            if depth == 0 and i < len(cond) - 1:
                break
        else:
            return cond[1:-1].strip()
    return cond


class ControlFlowMixin:

    def _condition(self, line: Line) -> str:
        return strip_outer_parens(self._rewrite(line.value))

    def _lower_if(self, line: Line, indent: str):
        self._lower_block(line, indent, f"if ({self._condition(line)})")

    def _lower_else_if(self, line: Line, indent: str):
        head = f"else if ({self._condition(line)})"
        if line.closes:
            head = "} " + head
        self._lower_block(line, indent, head)

    def _lower_while(self, line: Line, indent: str):
        self._lower_block(line, indent, f"while ({self._condition(line)})")

    def _lower_loop(self, line: Line, indent: str):
        self._lower_block(line, indent, "while (1)")

    def _lower_block(self, line: Line, indent: str, head: str):
        if line.body is not None:
            # if x > 0 { y = 1 }
            body = self._terminate(self._rewrite(line.body))
            self._emit(indent, f"{head} {{ {body} }}" if body else f"{head} {{ }}")
            return
        if not line.opens:
            self._lower_statement(line, indent)
            return
        self._emit(indent, head + " {")
        self.session.tracker.push(BlockFrame())
