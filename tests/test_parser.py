"""Tests for the Sprig parser."""

from __future__ import annotations

import pytest

from sprig.ast_nodes import (
    AssignmentStatement,
    BinaryOperationNode,
    BlankStatement,
    FloatNumber,
    FunctionDeclaration,
    IntegerNumber,
    UnaryOperationNode,
    Variable,
    VariableDeclaration,
    to_source,
)
from sprig.errors import DiagnosticCollector, ParseError
from sprig.lexer import Lexer
from sprig.parser import Parser
from sprig.tokens import Token, TokenKind

from tests.helpers import parse, parse_stmt


def parse_fails(source: str) -> ParseError:
    with pytest.raises(ParseError) as info:
        parse(source)
    return info.value


class TestExpressions:
    def test_integer(self):
        stmt = parse_stmt("7")
        assert isinstance(stmt, IntegerNumber)
        assert stmt.value == 7

    def test_float(self):
        stmt = parse_stmt("2.5")
        assert isinstance(stmt, FloatNumber)
        assert stmt.value == 2.5

    def test_subtraction_is_left_associative(self):
        assert to_source(parse_stmt("1 - 2 - 3")) == "((1 - 2) - 3)"

    def test_division_is_left_associative(self):
        assert to_source(parse_stmt("8 / 4 / 2")) == "((8 / 4) / 2)"

    def test_multiplication_binds_tighter(self):
        assert to_source(parse_stmt("2 + 3 * 4")) == "(2 + (3 * 4))"

    def test_parentheses_override_precedence(self):
        assert to_source(parse_stmt("(2 + 3) * 4")) == "((2 + 3) * 4)"

    def test_integer_division(self):
        stmt = parse_stmt("7 div 2")
        assert isinstance(stmt, BinaryOperationNode)
        assert stmt.op.kind == TokenKind.INTEGER_DIV

    def test_nested_unary(self):
        stmt = parse_stmt("--5")
        assert isinstance(stmt, UnaryOperationNode)
        assert isinstance(stmt.operand, UnaryOperationNode)
        assert to_source(stmt) == "(-(-5))"

    def test_unary_plus(self):
        assert to_source(parse_stmt("+3 * 2")) == "((+3) * 2)"

    def test_unary_in_term(self):
        assert to_source(parse_stmt("2 * -x")) == "(2 * (-x))"


class TestStatements:
    def test_assignment(self):
        stmt = parse_stmt("x = 1 + 2")
        assert isinstance(stmt, AssignmentStatement)
        assert stmt.target.name == "x"
        assert to_source(stmt) == "x = (1 + 2)"

    def test_statement_list(self):
        body = parse("a = 1; b = 2; 3").body
        assert len(body.statements) == 3
        assert isinstance(body.statements[2], IntegerNumber)

    def test_empty_program_is_one_blank(self):
        program = parse("")
        assert program.declarations == []
        assert len(program.body.statements) == 1
        assert isinstance(program.body.statements[0], BlankStatement)

    def test_trailing_semicolon_gives_blank(self):
        body = parse("x = 1;").body
        assert isinstance(body.statements[-1], BlankStatement)

    def test_assignment_needs_equals(self):
        err = parse_fails("x 1")
        assert err.token.kind == TokenKind.INTEGER
        assert err.expected == (TokenKind.ASSIGN,)

    def test_trailing_tokens_rejected(self):
        err = parse_fails("1 2")
        assert err.expected == (TokenKind.EOF,)
        assert err.diagnostic.code == "E200"


class TestDeclarations:
    def test_single_variable(self):
        program = parse("let x: integer; x = 1")
        [decl] = program.declarations
        assert isinstance(decl, VariableDeclaration)
        assert decl.variable.name == "x"
        assert decl.var_type.name == "integer"

    def test_several_names_share_a_type(self):
        program = parse("let a, b, c: float;")
        names = [d.variable.name for d in program.declarations]
        assert names == ["a", "b", "c"]
        assert {d.var_type.name for d in program.declarations} == {"float"}

    def test_several_let_lines(self):
        program = parse("let a: integer; let b: float; a = 1")
        assert [d.var_type.name for d in program.declarations] == ["integer", "float"]

    def test_let_needs_type(self):
        err = parse_fails("let x: y;")
        assert err.expected == (TokenKind.INTEGER_TYPE, TokenKind.FLOAT_TYPE)
        assert err.token.value == "y"

    def test_each_declaration_repeats_let(self):
        err = parse_fails("let a: integer; b: float;")
        assert err.token.kind == TokenKind.COLON
        assert err.expected == (TokenKind.ASSIGN,)

    def test_let_needs_semicolon(self):
        err = parse_fails("let x: integer x = 1")
        assert err.expected == (TokenKind.SEMI_COLON,)

    def test_function(self):
        program = parse("define f a = 1")
        [decl] = program.declarations
        assert isinstance(decl, FunctionDeclaration)
        assert decl.name == "f"
        assert decl.params == []
        assert isinstance(decl.body.body.statements[0], AssignmentStatement)

    def test_function_with_parameters(self):
        program = parse("define f(a, b: integer; c: float) a = b")
        [decl] = program.declarations
        assert [p.variable.name for p in decl.params] == ["a", "b", "c"]
        assert [p.var_type.name for p in decl.params] == ["integer", "integer", "float"]

    def test_function_with_empty_parameter_list(self):
        [decl] = parse("define f() 1").declarations
        assert decl.params == []

    def test_function_has_own_declarations(self):
        [decl] = parse("define f let x: integer; x = 1").declarations
        assert [d.variable.name for d in decl.body.declarations] == ["x"]

    def test_sequential_functions(self):
        program = parse("define f a = 1 define g b = 2")
        [f, g] = program.declarations
        assert (f.name, g.name) == ("f", "g")
        assert f.body.declarations == []

    def test_function_body_ends_at_outer_statement_separator(self):
        program = parse("define f a = 1; b = 2")
        [f] = program.declarations
        assert len(f.body.body.statements) == 2
        assert isinstance(program.body.statements[0], BlankStatement)

    def test_define_needs_name(self):
        err = parse_fails("define 1")
        assert err.expected == (TokenKind.IDENTIFIER,)

    def test_declaration_span(self):
        [decl] = parse("let count: integer;").declarations
        assert (decl.span.start_col, decl.span.end_col) == (5, 18)


class TestParserStream:
    def test_accepts_plain_token_list(self):
        tokens = Lexer("x = 1").lex()
        program = Parser(tokens).parse()
        assert isinstance(program.body.statements[0], AssignmentStatement)

    def test_source_without_eof_reads_as_eof(self):
        tokens = [t for t in Lexer("x = 1").lex() if t.kind != TokenKind.EOF]
        program = Parser(tokens).parse()
        assert to_source(program.body.statements[0]) == "x = 1"

    def test_pulls_one_token_at_a_time(self):
        pulled: list[Token] = []

        def stream():
            for tok in Lexer("a = 1; b = 2").tokens():
                pulled.append(tok)
                yield tok

        parser = Parser(stream())
        assert len(pulled) == 1
        parser.expect(TokenKind.IDENTIFIER)
        assert len(pulled) == 2

    def test_stops_at_first_error(self):
        pulled: list[Token] = []

        def stream():
            for tok in Lexer("x = ) y = 2 z = 3").tokens():
                pulled.append(tok)
                yield tok

        with pytest.raises(ParseError):
            Parser(stream()).parse()
        assert [t.value for t in pulled] == ["x", "=", ")"]

    def test_error_reaches_sink(self):
        sink = DiagnosticCollector()
        with pytest.raises(ParseError):
            Parser(Lexer("x = ;").tokens(), sink=sink).parse()
        assert sink.codes() == ["E200"]

    def test_error_message_names_token(self):
        err = parse_fails("x = ;")
        assert "got SEMI_COLON (';')" in err.diagnostic.message
        assert isinstance(err.token, Token)

    def test_unexpected_eof_message(self):
        err = parse_fails("x =")
        assert "end of input" in err.diagnostic.message

    def test_variable_leaf(self):
        stmt = parse_stmt("1 + y")
        assert isinstance(stmt.right, Variable)

    def test_bare_identifier_is_not_a_statement(self):
        err = parse_fails("y")
        assert err.expected == (TokenKind.ASSIGN,)
