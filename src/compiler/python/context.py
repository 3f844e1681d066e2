"""Block and context tracking.

The tracker owns a stack of typed frames; brace depth is the stack height.
Every frame remembers the depth it was opened at and decides what its
closing line turns into.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import Declaration, TranslationSession


INDENT_WIDTH = 4


@dataclass
class Frame:
    start_depth: int = 0
    declaration: Declaration | None = None

    def close(self, session: TranslationSession, indent: str) -> bool:
        """Run closing behavior. Returns True if the closing line was consumed."""
        return False


@dataclass
class BlockFrame(Frame):
    """if/while/loop bodies and any other brace-delimited block."""


@dataclass
class InitializerFrame(Frame):
    """Brace initializer of a variable: `var p: Point = {`."""


@dataclass
class FunctionFrame(Frame):
    def close(self, session: TranslationSession, indent: str) -> bool:
        session.symbols.pop_scope()
        return False


@dataclass
class StructFrame(Frame):
    name: str = ""
    attributes: str = ""

    def close(self, session: TranslationSession, indent: str) -> bool:
        text = f"}} {self.name}"
        if self.attributes:
            text += f" __attribute__(({self.attributes}))"
        session.emitter.emit(indent + text + ";")
        return True


@dataclass
class ResolveFrame(Frame):
    type_name: str = ""

    def close(self, session: TranslationSession, indent: str) -> bool:
        session.emitter.emit(indent + "// end resolve")
        return True


@dataclass
class MixinFrame(Frame):
    name: str = ""

    def close(self, session: TranslationSession, indent: str) -> bool:
        return True


_STRUCTURAL = (StructFrame, ResolveFrame, MixinFrame)


class ContextTracker:
    def __init__(self):
        self.frames: list[Frame] = []

    @property
    def depth(self) -> int:
        return len(self.frames)

    def push(self, frame: Frame) -> Frame:
        frame.start_depth = self.depth
        self.frames.append(frame)
        return frame

    def pop(self) -> Frame | None:
        if self.frames:
            return self.frames.pop()
        return None

    @property
    def top(self) -> Frame | None:
        return self.frames[-1] if self.frames else None

    def structural(self) -> Frame | None:
        """Innermost struct, resolve or mixin frame."""
        for frame in reversed(self.frames):
            if isinstance(frame, _STRUCTURAL):
                return frame
        return None

    def current_resolve(self) -> ResolveFrame | None:
        frame = self.structural()
        return frame if isinstance(frame, ResolveFrame) else None

    def in_mixin(self) -> bool:
        return any(isinstance(f, MixinFrame) for f in self.frames)

    def in_resolve(self) -> bool:
        return any(isinstance(f, ResolveFrame) for f in self.frames)

    def indent_for(self, closes: bool = False) -> str:
        """Indentation for a line emitted at the current depth.

        Closing lines sit one level out. Resolve blocks render as a flat
        group of functions, so they take away one more level.
        """
        depth = self.depth
        if closes and depth > 0:
            depth -= 1
        if self.in_resolve() and depth > 0:
            depth -= 1
        return " " * (INDENT_WIDTH * depth)
