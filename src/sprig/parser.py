"""Parser for the Sprig language.

Classic recursive descent, one method per grammar production::

    program        := declarations compound_statement
    declarations   := ("let" var_decl ";")*
                      ("define" ID ("(" formal_parameter_list ")")? program)*
    var_decl       := ID ("," ID)* ":" var_type
    formal_params  := ID ("," ID)* ":" var_type
    var_type       := "integer" | "float"
    compound_stmt  := statement (";" statement)*
    statement      := assignment | expression | <blank>
    assignment     := variable "=" expression
    expression     := term (("+" | "-") term)*
    term           := factor (("*" | "/" | "div") factor)*
    factor         := ("+" | "-") factor | INTEGER | FLOAT
                    | "(" expression ")" | variable
    variable       := ID

The parser holds a single lookahead token. Parsing is fail-fast: the first
token that does not fit raises :class:`~sprig.errors.ParseError`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import NoReturn

from sprig.ast_nodes import (
    AssignmentStatement,
    BinaryOperationNode,
    BlankStatement,
    CompoundStatement,
    Declaration,
    Expr,
    FloatNumber,
    FunctionDeclaration,
    FunctionParameter,
    IntegerNumber,
    Program,
    Stmt,
    UnaryOperationNode,
    Variable,
    VariableDeclaration,
    VariableType,
)
from sprig.errors import Diagnostic, DiagnosticSink, ErrorCode, ParseError
from sprig.log import get_logger
from sprig.source import Span
from sprig.tokens import TYPE_KEYWORDS, Token, TokenKind

logger = get_logger(__name__)

_ADD_OPS = frozenset({TokenKind.PLUS, TokenKind.MINUS})
_MUL_OPS = frozenset({TokenKind.MUL, TokenKind.FLOAT_DIV, TokenKind.INTEGER_DIV})
_EXPRESSION_START = frozenset({
    TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.LPAREN,
    TokenKind.PLUS, TokenKind.MINUS,
})


class Parser:
    """Parses a token stream into a Sprig AST."""

    def __init__(
        self,
        tokens: Iterable[Token],
        filename: str = "<stdin>",
        sink: DiagnosticSink | None = None,
    ) -> None:
        self._tokens: Iterator[Token] = iter(tokens)
        self.filename = filename
        self.sink = sink
        self.current = self._pull(Span(filename, 1, 1, 1, 1))

    # ── Token access ─────────────────────────────────────────────

    def _pull(self, fallback: Span) -> Token:
        """Next token from the source; a source that runs dry reads as EOF."""
        tok = next(self._tokens, None)
        if tok is None:
            return Token(TokenKind.EOF, "", fallback)
        return tok

    def _at(self, kind: TokenKind) -> bool:
        return self.current.kind == kind

    def expect(self, kind: TokenKind) -> Token:
        """Consume the lookahead if it has *kind*, else raise a syntax error."""
        if self.current.kind != kind:
            self._unexpected(kind)
        tok = self.current
        if tok.kind != TokenKind.EOF:
            self.current = self._pull(tok.span.start())
        return tok

    def _unexpected(self, *expected: TokenKind) -> NoReturn:
        tok = self.current
        wanted = " or ".join(k.name for k in expected)
        diag = Diagnostic.error(
            ErrorCode.UNEXPECTED_TOKEN,
            f"unexpected token: expected {wanted}, got {tok.describe()}",
            tok.span,
        )
        if self.sink is not None:
            self.sink(diag)
        raise ParseError(diag, tok, expected)

    # ── Top level ────────────────────────────────────────────────

    def parse(self) -> Program:
        """Parse a whole source file. Trailing tokens are a syntax error."""
        program = self._program()
        self.expect(TokenKind.EOF)
        logger.debug(
            "parsed %s: %d declaration(s), %d statement(s)",
            self.filename, len(program.declarations), len(program.body.statements),
        )
        return program

    def _program(self) -> Program:
        declarations = self._declarations()
        body = self._compound_statement()
        span = declarations[0].span.to(body.span) if declarations else body.span
        return Program(declarations=declarations, body=body, span=span)

    # ── Declarations ─────────────────────────────────────────────

    def _declarations(self) -> list[Declaration]:
        declarations: list[Declaration] = []

        # Each declaration line repeats 'let': a statement may also start
        # with an identifier, so one token of lookahead cannot tell them apart.
        while self._at(TokenKind.LET):
            self.expect(TokenKind.LET)
            declarations.extend(self._variable_declaration())
            self.expect(TokenKind.SEMI_COLON)

        while self._at(TokenKind.DEFINE):
            declarations.append(self._function_declaration())

        return declarations

    def _variable_declaration(self) -> list[VariableDeclaration]:
        """``a, b, c : integer`` declares three variables of one type."""
        variables = [self._variable()]
        while self._at(TokenKind.COMMA):
            self.expect(TokenKind.COMMA)
            variables.append(self._variable())
        self.expect(TokenKind.COLON)
        var_type = self._var_type()
        return [
            VariableDeclaration(v, var_type, v.span.to(var_type.span))
            for v in variables
        ]

    def _function_declaration(self) -> FunctionDeclaration:
        start = self.expect(TokenKind.DEFINE).span
        name_tok = self.expect(TokenKind.IDENTIFIER)

        params: list[FunctionParameter] = []
        if self._at(TokenKind.LPAREN):
            self.expect(TokenKind.LPAREN)
            params = self._formal_parameter_list()
            self.expect(TokenKind.RPAREN)

        body = self._program()
        return FunctionDeclaration(
            token=name_tok, name=name_tok.value,
            params=params, body=body, span=start.to(body.span),
        )

    def _formal_parameter_list(self) -> list[FunctionParameter]:
        """``a, b: integer; c: float`` or nothing at all."""
        if not self._at(TokenKind.IDENTIFIER):
            return []
        params = self._formal_parameters()
        while self._at(TokenKind.SEMI_COLON):
            self.expect(TokenKind.SEMI_COLON)
            params.extend(self._formal_parameters())
        return params

    def _formal_parameters(self) -> list[FunctionParameter]:
        variables = [self._variable()]
        while self._at(TokenKind.COMMA):
            self.expect(TokenKind.COMMA)
            variables.append(self._variable())
        self.expect(TokenKind.COLON)
        var_type = self._var_type()
        return [
            FunctionParameter(v, var_type, v.span.to(var_type.span))
            for v in variables
        ]

    def _var_type(self) -> VariableType:
        if self.current.kind not in TYPE_KEYWORDS:
            self._unexpected(TokenKind.INTEGER_TYPE, TokenKind.FLOAT_TYPE)
        tok = self.expect(self.current.kind)
        return VariableType(tok, tok.span)

    # ── Statements ───────────────────────────────────────────────

    def _compound_statement(self) -> CompoundStatement:
        statements = self._statement_list()
        non_blank = [s for s in statements if not isinstance(s, BlankStatement)]
        if non_blank:
            span = non_blank[0].span.to(non_blank[-1].span)
        else:
            span = statements[0].span
        return CompoundStatement(statements=statements, span=span)

    def _statement_list(self) -> list[Stmt]:
        statements = [self._statement()]
        while self._at(TokenKind.SEMI_COLON):
            self.expect(TokenKind.SEMI_COLON)
            statements.append(self._statement())
        return statements

    def _statement(self) -> Stmt:
        if self._at(TokenKind.IDENTIFIER):
            return self._assignment_statement()
        if self.current.kind in _EXPRESSION_START:
            return self._expression()
        return BlankStatement(self.current.span.start())

    def _assignment_statement(self) -> AssignmentStatement:
        target = self._variable()
        op = self.expect(TokenKind.ASSIGN)
        value = self._expression()
        return AssignmentStatement(target, op, value, target.span.to(value.span))

    # ── Expressions ──────────────────────────────────────────────

    def _expression(self) -> Expr:
        node = self._term()
        while self.current.kind in _ADD_OPS:
            op = self.expect(self.current.kind)
            right = self._term()
            node = BinaryOperationNode(node, op, right, node.span.to(right.span))
        return node

    def _term(self) -> Expr:
        node = self._factor()
        while self.current.kind in _MUL_OPS:
            op = self.expect(self.current.kind)
            right = self._factor()
            node = BinaryOperationNode(node, op, right, node.span.to(right.span))
        return node

    def _factor(self) -> Expr:
        tok = self.current
        match tok.kind:
            case TokenKind.PLUS | TokenKind.MINUS:
                self.expect(tok.kind)
                operand = self._factor()
                return UnaryOperationNode(tok, operand, tok.span.to(operand.span))
            case TokenKind.INTEGER:
                self.expect(TokenKind.INTEGER)
                value = int(tok.value) if tok.literal is None else int(tok.literal)
                return IntegerNumber(tok, value, tok.span)
            case TokenKind.FLOAT:
                self.expect(TokenKind.FLOAT)
                return FloatNumber(tok, float(tok.value), tok.span)
            case TokenKind.LPAREN:
                self.expect(TokenKind.LPAREN)
                node = self._expression()
                self.expect(TokenKind.RPAREN)
                return node
            case _:
                return self._variable()

    def _variable(self) -> Variable:
        tok = self.expect(TokenKind.IDENTIFIER)
        return Variable(tok, tok.value, tok.span)
