"""Line classification: token stream → LineKind.

Rules are tried in order and the first one that matches wins. A rule fills
in the Line it is given and returns True, or returns False to pass.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Optional

from .lexer import tokenize
from .tokens import FUNCTION_MODIFIERS, VAR_MODIFIERS, LineKind, Token, TokenType


@dataclass
class Line:
    kind: LineKind = LineKind.STATEMENT
    text: str = ""                     # stripped source text
    name: str = ""
    attributes: str = ""               # inline @[...] contents
    modifier: str = ""
    type: str = ""                     # field/var type, function return type
    params: str = ""
    value: str = ""                    # condition, initializer, include target, comment text
    body: Optional[str] = None         # single-line `{ ... }` body
    tail: str = ""                     # text after that body closes
    opens: bool = False
    closes: bool = False
    tokens: list[Token] = field(default_factory=list, repr=False)
    line: int = 0


class _Cursor:
    """Token cursor used by the classification rules."""

    def __init__(self, text: str, tokens: list[Token]):
        self.text = text
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Token:
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return self.tokens[-1]  # EOL

    def advance(self) -> Token:
        tok = self.peek()
        if tok.type != TokenType.EOL:
            self.pos += 1
        return tok

    def at_end(self) -> bool:
        return self.peek().type == TokenType.EOL

    def match(self, *types: TokenType) -> Token | None:
        if self.peek().type in types:
            return self.advance()
        return None

    def match_word(self, *words: str) -> Token | None:
        tok = self.peek()
        if tok.type == TokenType.IDENT and tok.value in words:
            return self.advance()
        return None

    def rest(self, tok: Token) -> str:
        """Source text following tok."""
        return self.text[tok.end:]

    def slice(self, start: Token, end: Token) -> str:
        """Source text between two tokens, both excluded."""
        return self.text[start.end:end.start].strip()

    def read_type(self) -> str | None:
        """type := IDENT '*'*"""
        tok = self.match(TokenType.IDENT)
        if tok is None:
            return None
        spelled = tok.value
        while self.match(TokenType.STAR):
            spelled += "*"
        return spelled

    def find_top_level(self, token_type: TokenType) -> Token | None:
        """Next token of the given type outside any parentheses/brackets."""
        depth = 0
        for tok in self.tokens[self.pos:]:
            if tok.type in (TokenType.LPAREN, TokenType.LBRACKET):
                depth += 1
            elif tok.type in (TokenType.RPAREN, TokenType.RBRACKET):
                depth -= 1
            elif tok.type == token_type and depth <= 0:
                return tok
        return None

    def skip_balanced_parens(self) -> Token | None:
        """Consume '(' ... ')' and return the closing paren."""
        if not self.match(TokenType.LPAREN):
            return None
        depth = 1
        while not self.at_end():
            tok = self.advance()
            if tok.type == TokenType.LPAREN:
                depth += 1
            elif tok.type == TokenType.RPAREN:
                depth -= 1
                if depth == 0:
                    return tok
        return None


def _inline_body(c: _Cursor, line: Line, brace: Token):
    """Body of a block closed on the line that opens it, and the text after it.

    `if x { a = 1 } else {` has body `a = 1` and tail `else {`.
    """
    start = next(i for i, tok in enumerate(c.tokens) if tok is brace)
    depth = 0
    for tok in c.tokens[start:]:
        if tok.type == TokenType.LBRACE:
            depth += 1
        elif tok.type == TokenType.RBRACE:
            depth -= 1
            if depth == 0:
                line.body = c.text[brace.end:tok.start].strip()
                line.tail = c.text[tok.end:].strip()
                return


# --- Rules ---

def _match_attribute(c: _Cursor, line: Line) -> bool:
    tok = c.match(TokenType.ATTRIBUTE)
    if tok is None or not c.at_end():
        return False
    line.value = tok.value
    return True


def _match_include(c: _Cursor, line: Line) -> bool:
    tok = c.peek()
    if tok.type != TokenType.DIRECTIVE or tok.value != "include":
        return False
    c.advance()
    path = c.match(TokenType.STRING)
    if path is not None:
        line.value = path.value
        return True
    rest = c.rest(tok).strip()
    if rest.startswith("<") and ">" in rest:
        line.value = rest[:rest.index(">") + 1]
        return True
    return False


def _match_native(c: _Cursor, line: Line) -> bool:
    if not c.match_word("native"):
        return False
    brace = c.match(TokenType.LBRACE)
    if brace is None:
        return False
    # Raw text after the opening brace; the native handler counts braces in it
    line.value = c.rest(brace)
    return True


def _match_shared(c: _Cursor, line: Line) -> bool:
    if not c.match_word("shared"):
        return False
    name = c.match(TokenType.IDENT)
    brace = c.match(TokenType.LBRACE)
    if name is None or brace is None:
        return False
    line.name = name.value
    line.value = c.rest(brace)
    return True


def _match_struct(c: _Cursor, line: Line) -> bool:
    attr = c.match(TokenType.ATTRIBUTE)
    if not c.match_word("struct"):
        return False
    name = c.match(TokenType.IDENT)
    brace = c.match(TokenType.LBRACE)
    if name is None or brace is None:
        return False
    line.name = name.value
    line.attributes = attr.value if attr else ""
    _inline_body(c, line, brace)
    return True


def _match_use(c: _Cursor, line: Line) -> bool:
    if not c.match_word("use"):
        return False
    name = c.match(TokenType.IDENT)
    if name is None:
        return False
    line.name = name.value
    return True


def _match_field(c: _Cursor, line: Line) -> bool:
    name = c.match(TokenType.IDENT)
    if name is None or not c.match(TokenType.COLON):
        return False
    spelled = c.read_type()
    if spelled is None:
        return False
    line.name = name.value
    line.type = spelled
    return True


def _match_resolve(c: _Cursor, line: Line) -> bool:
    if not c.match_word("resolve"):
        return False
    name = c.match(TokenType.IDENT)
    if name is None or not c.match(TokenType.LBRACE):
        return False
    line.name = name.value
    return True


def _match_function(c: _Cursor, line: Line) -> bool:
    attr = c.match(TokenType.ATTRIBUTE)
    modifier = c.match_word(*FUNCTION_MODIFIERS)
    if not c.match_word("fn"):
        return False
    name = c.match(TokenType.IDENT)
    if name is None:
        return False
    lparen = c.peek()
    rparen = c.skip_balanced_parens()
    if rparen is None or not c.match(TokenType.ARROW):
        return False
    ret = c.read_type()
    if ret is None:
        return False
    line.name = name.value
    line.attributes = attr.value if attr else ""
    line.modifier = modifier.value if modifier else ""
    line.params = c.slice(lparen, rparen)
    line.type = ret
    brace = c.match(TokenType.LBRACE)
    if brace is not None:
        _inline_body(c, line, brace)
    return True


def _match_var(c: _Cursor, line: Line) -> bool:
    if not c.match_word("var"):
        return False
    modifier = c.match_word(*VAR_MODIFIERS)
    name = c.match(TokenType.IDENT)
    if name is None or not c.match(TokenType.COLON):
        return False
    spelled = c.read_type()
    if spelled is None:
        return False
    line.name = name.value
    line.modifier = modifier.value if modifier else ""
    line.type = spelled
    eq = c.match(TokenType.EQ)
    if eq is not None:
        value = c.rest(eq).strip()
        if value.endswith(";"):
            value = value[:-1].rstrip()
        line.value = value
    return True


def _match_condition_block(c: _Cursor, line: Line, keyword: Token) -> bool:
    """COND '{' [body '}'] following an if/while keyword."""
    brace = c.find_top_level(TokenType.LBRACE)
    if brace is None:
        return False
    cond = c.text[keyword.end:brace.start].strip()
    if not cond:
        return False
    line.value = cond
    _inline_body(c, line, brace)
    return True


def _match_else_if(c: _Cursor, line: Line) -> bool:
    c.match(TokenType.RBRACE)
    if not c.match_word("else"):
        return False
    keyword = c.match_word("if")
    if keyword is None:
        return False
    return _match_condition_block(c, line, keyword)


def _match_if(c: _Cursor, line: Line) -> bool:
    keyword = c.match_word("if")
    return keyword is not None and _match_condition_block(c, line, keyword)


def _match_while(c: _Cursor, line: Line) -> bool:
    keyword = c.match_word("while")
    return keyword is not None and _match_condition_block(c, line, keyword)


def _match_loop(c: _Cursor, line: Line) -> bool:
    if not c.match_word("loop"):
        return False
    brace = c.match(TokenType.LBRACE)
    if brace is None:
        return False
    _inline_body(c, line, brace)
    return True


_RULES: list[tuple[LineKind, Callable[[_Cursor, Line], bool]]] = [
    (LineKind.ATTRIBUTE, _match_attribute),
    (LineKind.INCLUDE, _match_include),
    (LineKind.NATIVE, _match_native),
    (LineKind.SHARED, _match_shared),
    (LineKind.STRUCT, _match_struct),
    (LineKind.USE, _match_use),
    (LineKind.FIELD, _match_field),
    (LineKind.RESOLVE, _match_resolve),
    (LineKind.FUNCTION, _match_function),
    (LineKind.VAR, _match_var),
    (LineKind.ELSE_IF, _match_else_if),
    (LineKind.IF, _match_if),
    (LineKind.WHILE, _match_while),
    (LineKind.LOOP, _match_loop),
]


def opens_block(text: str) -> bool:
    return text.endswith("{") or text.startswith("{")


def closes_block(text: str) -> bool:
    return text.startswith("}")


def classify(text: str, line_no: int = 0) -> Line:
    """Classify one source line."""
    text = text.strip()
    if not text:
        return Line(kind=LineKind.BLANK, line=line_no)
    if text.startswith("#"):
        return Line(kind=LineKind.COMMENT, text=text, value=text[1:], line=line_no)

    tokens = tokenize(text)
    for kind, rule in _RULES:
        line = Line(kind=kind, text=text, tokens=tokens, line=line_no,
                    opens=opens_block(text), closes=closes_block(text))
        if rule(_Cursor(text, tokens), line):
            return line

    return Line(kind=LineKind.STATEMENT, text=text, tokens=tokens, line=line_no,
                opens=opens_block(text), closes=closes_block(text))


def split_fields(text: str) -> list[str]:
    """Field declarations written side by side, e.g. `a: i32  b: ptr` or `a: i32, b: ptr`."""
    c = _Cursor(text, tokenize(text))
    fields = []
    while not c.at_end():
        pos = c.pos
        if _match_field(c, Line()):
            fields.append(text[c.tokens[pos].start:c.tokens[c.pos - 1].end])
        else:
            c.pos = pos + 1
    return fields


def classify_source(source: str) -> list[Line]:
    return [classify(raw, i) for i, raw in enumerate(source.splitlines(), 1)]


def classify_fields(text: str, line_no: int = 0) -> list[Line]:
    """FIELD lines for every field declared on a field line, else []."""
    if classify(text, line_no).kind != LineKind.FIELD:
        return []
    return [classify(part, line_no) for part in split_fields(text)]
