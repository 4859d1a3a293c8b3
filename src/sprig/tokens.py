"""Token kinds and token representation for the Sprig lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from sprig.source import Span


class TokenKind(Enum):
    # Literals
    INTEGER = auto()
    FLOAT = auto()

    # Identifiers
    IDENTIFIER = auto()

    # Keywords
    LET = auto()
    DEFINE = auto()
    INTEGER_TYPE = auto()
    FLOAT_TYPE = auto()

    # Operators
    PLUS = auto()
    MINUS = auto()
    MUL = auto()
    FLOAT_DIV = auto()
    INTEGER_DIV = auto()
    ASSIGN = auto()

    # Punctuation
    LPAREN = auto()
    RPAREN = auto()
    SEMI_COLON = auto()
    COLON = auto()
    COMMA = auto()

    # Special
    BLANK = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    span: Span
    literal: int | float | None = None

    @property
    def line(self) -> int:
        return self.span.start_line

    @property
    def column(self) -> int:
        return self.span.start_col

    def describe(self) -> str:
        """Short human-readable form used in diagnostics."""
        if self.kind == TokenKind.EOF:
            return "end of input"
        return f"{self.kind.name} ({self.value!r})"


KEYWORDS: dict[str, TokenKind] = {
    "let": TokenKind.LET,
    "define": TokenKind.DEFINE,
    "integer": TokenKind.INTEGER_TYPE,
    "float": TokenKind.FLOAT_TYPE,
    "div": TokenKind.INTEGER_DIV,
}

SINGLE_CHAR_TOKENS: dict[str, TokenKind] = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.MUL,
    "/": TokenKind.FLOAT_DIV,
    "=": TokenKind.ASSIGN,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ";": TokenKind.SEMI_COLON,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
}

TYPE_KEYWORDS: frozenset[TokenKind] = frozenset({
    TokenKind.INTEGER_TYPE,
    TokenKind.FLOAT_TYPE,
})

# Placeholder operator for nodes that have no operator of their own.
ZERO_TOKEN = Token(TokenKind.BLANK, "", Span("<none>", 0, 0, 0, 0))
