"""Token and line-kind definitions for the Onyx language.

Onyx is translated line by line, so the lexer works on one logical line at
a time and the classifier maps each token stream to a LineKind.
"""

from __future__ import annotations
from enum import Enum, auto
from dataclasses import dataclass


class TokenType(Enum):
    IDENT = auto()
    NUMBER = auto()
    STRING = auto()       # "..." (value keeps its quotes)
    CHAR = auto()         # '...'
    ATTRIBUTE = auto()    # @[...] (value is the text between the brackets)
    DIRECTIVE = auto()    # @name (value is the name)

    # Punctuation
    LBRACE = auto()       # {
    RBRACE = auto()       # }
    LPAREN = auto()       # (
    RPAREN = auto()       # )
    LBRACKET = auto()     # [
    RBRACKET = auto()     # ]
    COLON = auto()        # :
    COMMA = auto()        # ,
    DOT = auto()          # .
    STAR = auto()         # *
    EQ = auto()           # =
    ARROW = auto()        # ->
    PIPE_GT = auto()      # |>
    OP = auto()           # any other operator

    EOL = auto()


@dataclass
class Token:
    type: TokenType
    value: str
    start: int   # offset into the stripped line
    end: int

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, {self.start}:{self.end})"


class LineKind(Enum):
    BLANK = auto()
    COMMENT = auto()
    ATTRIBUTE = auto()
    INCLUDE = auto()
    NATIVE = auto()
    SHARED = auto()
    STRUCT = auto()
    USE = auto()
    FIELD = auto()
    RESOLVE = auto()
    FUNCTION = auto()
    VAR = auto()
    ELSE_IF = auto()
    IF = auto()
    WHILE = auto()
    LOOP = auto()
    STATEMENT = auto()


# Operators recognised as a single token (longest match first)
OPERATORS: list[tuple[str, TokenType]] = [
    ("->", TokenType.ARROW),
    ("|>", TokenType.PIPE_GT),
    ("==", TokenType.OP),
    ("!=", TokenType.OP),
    ("<=", TokenType.OP),
    (">=", TokenType.OP),
    ("&&", TokenType.OP),
    ("||", TokenType.OP),
    ("<<", TokenType.OP),
    (">>", TokenType.OP),
    ("+=", TokenType.OP),
    ("-=", TokenType.OP),
    ("/=", TokenType.OP),
    ("%=", TokenType.OP),
]

PUNCTUATION: dict[str, TokenType] = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "*": TokenType.STAR,
    "=": TokenType.EQ,
}

FUNCTION_MODIFIERS = {"inline", "extern", "static"}
VAR_MODIFIERS = {"volatile", "register", "const"}
