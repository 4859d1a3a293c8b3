"""Lexer for the Sprig language.

Produces tokens lazily from source text. The parser pulls one token at a
time through :meth:`Lexer.get_next_token` or iterates :meth:`Lexer.tokens`.
"""

from __future__ import annotations

from collections.abc import Iterator

from sprig.errors import Diagnostic, DiagnosticSink, ErrorCode, LexError
from sprig.log import get_logger
from sprig.source import Span
from sprig.tokens import KEYWORDS, SINGLE_CHAR_TOKENS, Token, TokenKind

logger = get_logger(__name__)

_DIGITS = frozenset("0123456789")


class Lexer:
    """Tokenizes Sprig source code."""

    def __init__(
        self,
        source: str,
        filename: str = "<stdin>",
        sink: DiagnosticSink | None = None,
    ) -> None:
        self.source = source
        self.filename = filename
        self.sink = sink
        self.pos = 0
        self.line = 1
        self.col = 1

    def get_next_token(self) -> Token:
        """Consume and return the next token. Returns EOF once input is exhausted."""
        self._skip_trivia()
        if self.pos >= len(self.source):
            return self._make(TokenKind.EOF, "", self.line, self.col)

        ch = self.source[self.pos]
        if ch in _DIGITS:
            return self._lex_number()
        if ch.isalpha() or ch == '_':
            return self._lex_identifier()
        if ch in SINGLE_CHAR_TOKENS:
            start_line, start_col = self.line, self.col
            self._advance()
            return self._make(SINGLE_CHAR_TOKENS[ch], ch, start_line, start_col)

        span = Span(self.filename, self.line, self.col, self.line, self.col)
        diag = Diagnostic.error(
            ErrorCode.UNEXPECTED_CHARACTER,
            f"unexpected character: {ch!r}",
            span,
        )
        if self.sink is not None:
            self.sink(diag)
        raise LexError(diag, ch)

    def tokens(self) -> Iterator[Token]:
        """Yield tokens up to and including a single EOF token."""
        while True:
            tok = self.get_next_token()
            yield tok
            if tok.kind == TokenKind.EOF:
                return

    def lex(self) -> list[Token]:
        """Tokenize the entire source and return the token list."""
        tokens = list(self.tokens())
        logger.debug("lexed %d tokens from %s", len(tokens), self.filename)
        return tokens

    # ── Helpers ───────────────────────────────────────────────────

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _make(
        self,
        kind: TokenKind,
        value: str,
        start_line: int,
        start_col: int,
        literal: int | float | None = None,
    ) -> Token:
        end_col = max(start_col, self.col - 1)
        span = Span(self.filename, start_line, start_col, self.line, end_col)
        return Token(kind, value, span, literal)

    def _skip_trivia(self) -> None:
        """Skip whitespace (newlines included) and // line comments."""
        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch in ' \t\r\n':
                self._advance()
            elif ch == '/' and self._peek(1) == '/':
                while self.pos < len(self.source) and self.source[self.pos] != '\n':
                    self._advance()
            else:
                return

    # ── Numbers ──────────────────────────────────────────────────

    def _lex_number(self) -> Token:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
            text.append(self._advance())

        # A '.' only belongs to the number when a digit follows it
        if self._peek() == '.' and self._peek(1) in _DIGITS:
            text.append(self._advance())
            while self.pos < len(self.source) and self.source[self.pos] in _DIGITS:
                text.append(self._advance())
            value = ''.join(text)
            return self._make(TokenKind.FLOAT, value, start_line, start_col, float(value))

        value = ''.join(text)
        return self._make(TokenKind.INTEGER, value, start_line, start_col, int(value))

    # ── Identifiers and Keywords ─────────────────────────────────

    def _lex_identifier(self) -> Token:
        start_line = self.line
        start_col = self.col
        text = []
        while self.pos < len(self.source) and (
            self.source[self.pos].isalnum() or self.source[self.pos] == '_'
        ):
            text.append(self._advance())
        word = ''.join(text)
        kind = KEYWORDS.get(word, TokenKind.IDENTIFIER)
        return self._make(kind, word, start_line, start_col)
