"""Lexical scopes: variable name → declared Onyx type."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class Scope:
    bindings: dict[str, str] = field(default_factory=dict)

    def define(self, name: str, onyx_type: str):
        self.bindings[name] = onyx_type

    def __contains__(self, name: str) -> bool:
        return name in self.bindings


class SymbolTable:
    """Stack of scopes, searched innermost first.

    Only function bodies push a scope, so outside the root scope the stack
    height tracks the number of open function bodies.
    """

    def __init__(self):
        self.scopes: list[Scope] = []

    def reset(self):
        """Drop every scope and start over with a fresh root scope."""
        self.scopes.clear()
        self.push_scope()

    def push_scope(self) -> Scope:
        scope = Scope()
        self.scopes.append(scope)
        return scope

    def pop_scope(self) -> Scope | None:
        if self.scopes:
            return self.scopes.pop()
        return None

    def define(self, name: str, onyx_type: str):
        if self.scopes:
            self.scopes[-1].define(name, onyx_type)

    def lookup(self, name: str) -> str | None:
        for scope in reversed(self.scopes):
            if name in scope:
                return scope.bindings[name]
        return None

    @property
    def depth(self) -> int:
        return len(self.scopes)
