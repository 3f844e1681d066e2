"""Output buffer for generated C."""

from __future__ import annotations
import os


class Emitter:
    def __init__(self):
        self.lines: list[str] = []

    def emit(self, line: str):
        """Append one output line. Blank source lines arrive here at every depth,
        top level included, and are kept as empty lines."""
        # Whitespace-only lines (e.g. indentation of a blank line) are kept empty
        self.lines.append(line if line.strip() else "")

    def header(self, source_name: str) -> str:
        return f"// transpiled from {os.path.basename(source_name)}"

    def render(self, source_name: str) -> str:
        out = [self.header(source_name)] + self.lines
        return "\n".join(out) + "\n"
