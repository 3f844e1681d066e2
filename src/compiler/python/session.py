"""Translation session: all mutable state of one translation run.

A session is created for exactly one source unit and discarded afterwards;
nothing in it is shared between runs.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .context import ContextTracker
from .discovery import MixinRegistry
from .emitter import Emitter
from .scopes import SymbolTable


@dataclass
class TranspilerConfig:
    verbose: bool = False
    keep_comments: bool = True


class PendingAttributes:
    """Attribute fragments waiting for the next struct or function definition."""

    def __init__(self):
        self.text = ""

    def add(self, fragment: str):
        if self.text:
            self.text += ", "
        self.text += fragment

    def consume(self, inline: str = "") -> str:
        """Pending fragments first, then inline ones. Clears the buffer."""
        merged = self.text
        if inline:
            merged = f"{merged}, {inline}" if merged else inline
        self.text = ""
        return merged

    def __bool__(self) -> bool:
        return bool(self.text)


@dataclass
class NativeRegion:
    """An open `native { ... }` region and its brace balance."""
    line: int
    balance: int = 1


@dataclass
class Declaration:
    """Outline entry recorded during lowering (used by editor tooling)."""
    kind: str       # "struct" | "field" | "mixin" | "resolve" | "function"
    name: str
    line: int
    end_line: int = 0
    detail: str = ""
    children: list[Declaration] = field(default_factory=list)


class TranslationSession:
    def __init__(self, config: TranspilerConfig | None = None, filename: str = "<stdin>"):
        self.config = config or TranspilerConfig()
        self.filename = filename
        self.registry = MixinRegistry()
        self.tracker = ContextTracker()
        self.symbols = SymbolTable()
        self.pending = PendingAttributes()
        self.emitter = Emitter()
        self.native: NativeRegion | None = None
        self.declarations: list[Declaration] = []
        self.warnings: list[str] = []
        self.current_line = 0

    def begin_rewrite(self):
        """Reset per-pass state before the rewrite pass."""
        self.symbols.reset()
        self.tracker = ContextTracker()
        self.pending = PendingAttributes()
        self.native = None
        self.current_line = 0

    def warning(self, msg: str, line: int = 0, col: int = 1):
        self.warnings.append(f"{msg} at {line or self.current_line}:{col}")

    def render(self) -> str:
        return self.emitter.render(self.filename)
