"""Mixin discovery pass.

Collects every `shared Name { ... }` bundle before the rewrite pass runs,
so `use Name` works regardless of where the mixin is defined.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterator

from .classifier import classify, split_fields
from .tokens import LineKind

logger = logging.getLogger("oxc")


@dataclass(frozen=True)
class MixinDefinition:
    name: str
    body: tuple[str, ...] = ()
    line: int = 0
    end_line: int = 0


class MixinRegistry:
    def __init__(self):
        self._mixins: dict[str, MixinDefinition] = {}

    def register(self, mixin: MixinDefinition):
        self._mixins[mixin.name] = mixin

    def get(self, name: str) -> MixinDefinition | None:
        return self._mixins.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._mixins

    def __len__(self) -> int:
        return len(self._mixins)

    def __iter__(self) -> Iterator[MixinDefinition]:
        return iter(self._mixins.values())


def scan_braces(text: str, depth: int) -> tuple[int, int | None]:
    """Apply every brace in text to depth.

    Returns the new depth and, if depth reached zero, the offset of the
    brace that closed it.
    """
    for i, ch in enumerate(text):
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return depth, i
    return depth, None


def discover_mixins(source: str) -> MixinRegistry:
    """Scan source for mixin definitions and return the populated registry."""
    registry = MixinRegistry()
    name = ""
    start_line = 0
    body: list[str] = []
    depth = 0

    for line_no, raw in enumerate(source.splitlines(), 1):
        if depth == 0:
            line = classify(raw, line_no)
            if line.kind != LineKind.SHARED:
                continue
            name, start_line, body = line.name, line_no, []
            depth, closed_at = scan_braces(line.value, 1)
            if closed_at is not None:
                # shared M { x: i32 }
                fields = tuple(split_fields(line.value[:closed_at]))
                registry.register(MixinDefinition(name, fields, line_no, line_no))
            continue

        depth, closed_at = scan_braces(raw, depth)
        if closed_at is None:
            body.append(raw)
            continue
        registry.register(MixinDefinition(name, tuple(body), start_line, line_no))
        logger.debug("discovered mixin %s (%d lines)", name, len(body))

    if depth > 0:
        logger.debug("mixin %s opened at line %d is never closed", name, start_line)
    return registry
