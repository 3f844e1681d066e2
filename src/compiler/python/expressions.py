"""Expression rewriting: method-call and pipe desugaring.

    v.set(1, 2)        → Vec_set(&v, 1, 2)      (v declared as Vec)
    x |> f(1)          → f(x, 1)
    x |> f(1, _)       → f(1, x)

Both rewrites run as bounded loops over the leftmost remaining match. An
unresolvable method receiver ends the method-call loop and is reported in
the result; the text from that point on is left as written.

Matching runs on a copy of the line with string and char literals masked
out, so nothing inside quotes is ever rewritten.
"""

from __future__ import annotations
import re
from dataclasses import dataclass

from .lexer import mask_quoted
from .scopes import SymbolTable
from .types import split_pointer


MAX_REWRITE_PASSES = 256

_SELF_DOT_RE = re.compile(r"\bself\.")
# receiver.method( ; receiver must not itself be a member (a.b.c(), p->b.c())
_METHOD_CALL_RE = re.compile(r"(?<![\w.>])([A-Za-z_]\w*)\.(\w+)\(")
_PIPE_RE = re.compile(r"\|>\s*(\w+)\(")
_PLACEHOLDER_RE = re.compile(r"\b_\b")
_RETURN_RE = re.compile(r"return\b\s*")


@dataclass
class RewriteResult:
    text: str
    unresolved: str | None = None   # receiver whose type could not be found


def _splice(text: str, masked: str, pattern: re.Pattern, replacement: str) -> str:
    """Replace every match of pattern found in masked at the same offsets in text."""
    parts = []
    last = 0
    for m in pattern.finditer(masked):
        parts.append(text[last:m.start()])
        parts.append(replacement)
        last = m.end()
    parts.append(text[last:])
    return "".join(parts)


def rewrite_self(text: str) -> str:
    return _splice(text, mask_quoted(text), _SELF_DOT_RE, "self->")


def _closing_paren(masked: str, open_at: int) -> int | None:
    """Offset of the `)` matching the `(` at open_at."""
    depth = 0
    for i in range(open_at, len(masked)):
        ch = masked[i]
        if ch == '(':
            depth += 1
        elif ch == ')':
            depth -= 1
            if depth == 0:
                return i
    return None


def _receiver_arg(name: str, onyx_type: str) -> tuple[str, str]:
    """(type prefix, first argument) for passing name to a Type_ function."""
    base, stars = split_pointer(onyx_type)
    if stars == 0:
        return base, f"&{name}"
    return base, "*" * (stars - 1) + name


def _join_args(first: str, rest: str) -> str:
    rest = rest.strip()
    if not first:
        return rest
    return f"{first}, {rest}" if rest else first


def _pipe_operand_start(text: str, end: int) -> int:
    """Start offset of the operand that ends just before a `|>` at `end`."""
    depth = 0
    i = end - 1
    while i >= 0:
        ch = text[i]
        if ch in ")]":
            depth += 1
        elif ch in "([":
            if depth == 0:
                break
            depth -= 1
        elif depth == 0:
            if ch in ",;{":
                break
            if ch == "=" and text[i - 1:i] not in ("=", "!", "<", ">") and text[i + 1:i + 2] != "=":
                break
        i -= 1
    start = i + 1
    while start < end and text[start].isspace():
        start += 1
    m = _RETURN_RE.match(text, start, end)
    if m:
        start = m.end()
    return start


class ExpressionRewriter:
    def __init__(self, symbols: SymbolTable):
        self.symbols = symbols

    def rewrite(self, text: str) -> RewriteResult:
        result = self.rewrite_method_calls(text)
        result.text = self.rewrite_pipes(result.text)
        return result

    def rewrite_method_calls(self, text: str) -> RewriteResult:
        for _ in range(MAX_REWRITE_PASSES):
            masked = mask_quoted(text)
            m = _METHOD_CALL_RE.search(masked)
            if m is None:
                break
            close = _closing_paren(masked, m.end() - 1)
            if close is None:
                break
            receiver, method = m.groups()
            onyx_type = self.symbols.lookup(receiver)
            if not onyx_type:
                return RewriteResult(text, unresolved=receiver)
            type_name, first = _receiver_arg(receiver, onyx_type)
            args = text[m.end():close]
            call = f"{type_name}_{method}({_join_args(first, args)})"
            text = text[:m.start()] + call + text[close + 1:]
        return RewriteResult(text)

    def rewrite_pipes(self, text: str) -> str:
        for _ in range(MAX_REWRITE_PASSES):
            masked = mask_quoted(text)
            m = _PIPE_RE.search(masked)
            if m is None:
                break
            close = _closing_paren(masked, m.end() - 1)
            if close is None:
                break
            func = m.group(1)
            start = _pipe_operand_start(masked, m.start())
            operand = text[start:m.start()].strip()

            piped = operand
            onyx_type = self.symbols.lookup(operand)
            if onyx_type:
                type_name, first = _receiver_arg(operand, onyx_type)
                # Type_-prefixed functions come from resolve blocks and take a pointer
                if func.startswith(type_name + "_"):
                    piped = first

            args = text[m.end():close]
            masked_args = masked[m.end():close]
            if _PLACEHOLDER_RE.search(masked_args):
                new_args = _splice(args, masked_args, _PLACEHOLDER_RE, piped)
            else:
                new_args = _join_args(piped, args)
            text = text[:start] + f"{func}({new_args})" + text[close + 1:]
        return text
