"""Line lexer for the Onyx language.

Tokenizes a single stripped line. The lexer never fails: anything it does
not recognise becomes an OP token, so a malformed line still reaches the
classifier and falls back to a literal rendering.
"""

from .tokens import OPERATORS, PUNCTUATION, Token, TokenType


class Lexer:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.tokens: list[Token] = []

    def tokenize(self) -> list[Token]:
        while self.pos < len(self.text):
            ch = self.text[self.pos]
            if ch in (' ', '\t', '\r'):
                self.pos += 1
            elif ch == '@':
                self._read_at()
            elif ch in ('"', "'"):
                self._read_quoted(ch)
            elif ch.isdigit():
                self._read_number()
            elif ch.isalpha() or ch == '_':
                self._read_identifier()
            else:
                self._read_operator()

        self.tokens.append(Token(TokenType.EOL, "", len(self.text), len(self.text)))
        return self.tokens

    # --- Character helpers ---

    def _peek(self, offset: int = 0) -> str:
        pos = self.pos + offset
        if pos < len(self.text):
            return self.text[pos]
        return '\0'

    def _emit(self, token_type: TokenType, value: str, start: int):
        self.tokens.append(Token(token_type, value, start, self.pos))

    # --- Readers ---

    def _read_at(self):
        start = self.pos
        if self._peek(1) == '[':
            # @[ ... ] with nested brackets, e.g. @[aligned(4), section("x[0]")]
            depth = 0
            i = self.pos + 1
            while i < len(self.text):
                c = self.text[i]
                if c in ('"', "'"):
                    i = _skip_quoted(self.text, i)
                    continue
                if c == '[':
                    depth += 1
                elif c == ']':
                    depth -= 1
                    if depth == 0:
                        self.pos = i + 1
                        self._emit(TokenType.ATTRIBUTE, self.text[start + 2:i].strip(), start)
                        return
                i += 1
        elif self._peek(1).isalpha():
            self.pos += 1
            while self.pos < len(self.text) and (self._peek().isalnum() or self._peek() == '_'):
                self.pos += 1
            self._emit(TokenType.DIRECTIVE, self.text[start + 1:self.pos], start)
            return
        self.pos += 1
        self._emit(TokenType.OP, "@", start)

    def _read_quoted(self, quote: str):
        start = self.pos
        self.pos = _skip_quoted(self.text, self.pos)
        token_type = TokenType.STRING if quote == '"' else TokenType.CHAR
        self._emit(token_type, self.text[start:self.pos], start)

    def _read_number(self):
        start = self.pos
        while self.pos < len(self.text) and (self._peek().isalnum() or self._peek() in "._"):
            # stop before a member access on a literal, e.g. "1.foo"
            if self._peek() == '.' and not self._peek(1).isdigit():
                break
            self.pos += 1
        self._emit(TokenType.NUMBER, self.text[start:self.pos], start)

    def _read_identifier(self):
        start = self.pos
        while self.pos < len(self.text) and (self._peek().isalnum() or self._peek() == '_'):
            self.pos += 1
        self._emit(TokenType.IDENT, self.text[start:self.pos], start)

    def _read_operator(self):
        start = self.pos
        for op, token_type in OPERATORS:
            if self.text.startswith(op, self.pos):
                self.pos += len(op)
                self._emit(token_type, op, start)
                return
        ch = self.text[self.pos]
        self.pos += 1
        self._emit(PUNCTUATION.get(ch, TokenType.OP), ch, start)


def _skip_quoted(text: str, pos: int) -> int:
    """Return the offset just past the literal starting at pos.

    An unterminated literal runs to the end of the line.
    """
    quote = text[pos]
    i = pos + 1
    while i < len(text):
        if text[i] == '\\':
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def tokenize(text: str) -> list[Token]:
    return Lexer(text).tokenize()


def mask_quoted(text: str, fill: str = "\x01") -> str:
    """Copy of text with every quoted literal (quotes included) blanked out.

    Offsets are preserved, so matches found in the mask apply to text.
    """
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in ('"', "'"):
            end = _skip_quoted(text, i)
            out.append(fill * (end - i))
            i = end
            continue
        out.append(ch)
        i += 1
    return "".join(out)
