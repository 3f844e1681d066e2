"""Native passthrough: `native { ... }` regions are copied out as C."""

from __future__ import annotations

from ..classifier import Line
from ..discovery import scan_braces
from ..session import NativeRegion


class NativeMixin:

    def _open_native(self, line: Line):
        self.session.native = NativeRegion(line=line.line)
        self._native_text(line.value, boundary=True)

    def _continue_native(self, raw: str):
        self._native_text(raw, boundary=False)

    def _native_text(self, text: str, boundary: bool):
        s = self.session
        region = s.native
        balance, closed_at = scan_braces(text, region.balance)
        if closed_at is not None:
            text = text[:closed_at]
            s.native = None
            boundary = True
        else:
            region.balance = balance

        content = text.strip()
        # The `native {` and closing lines only contribute what sits beside the braces
        if content or not boundary:
            self._emit(s.tracker.indent_for(), content)
