"""Shared test helpers for the Sprig test suite."""

from __future__ import annotations

import pytest

from sprig.ast_nodes import Program, Stmt
from sprig.checker import Checker
from sprig.errors import SemanticError
from sprig.lexer import Lexer
from sprig.parser import Parser
from sprig.symbols import Scope


def parse(source: str) -> Program:
    """Lex and parse source, return the Program."""
    return Parser(Lexer(source, "<test>").tokens(), "<test>").parse()


def parse_stmt(source: str) -> Stmt:
    """Parse source and return the first top-level statement."""
    return parse(source).body.statements[0]


def check(source: str) -> Scope:
    """Parse and check source, asserting no errors. Returns the global scope."""
    return Checker().check(parse(source))


def check_fails(source: str, error: type[SemanticError]) -> SemanticError:
    """Parse and check source, asserting the given error is raised."""
    program = parse(source)
    with pytest.raises(error) as info:
        Checker().check(program)
    return info.value
