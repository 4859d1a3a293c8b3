"""Front-end pipeline: source text -> tokens -> AST -> checked AST."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from sprig.ast_nodes import Program
from sprig.checker import Checker
from sprig.errors import CompileError, Diagnostic, DiagnosticSink
from sprig.lexer import Lexer
from sprig.log import get_logger
from sprig.parser import Parser
from sprig.symbols import Scope

logger = get_logger(__name__)


@dataclass
class CheckResult:
    """Outcome of checking one source file.

    ``program`` is set whenever parsing succeeded, ``scope`` only when the
    semantic check passed as well.
    """

    ok: bool
    program: Program | None = None
    scope: Scope | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


def parse_source(
    source: str, filename: str = "<stdin>", sink: DiagnosticSink | None = None,
) -> Program:
    """Lex and parse *source*. Raises CompileError on the first problem."""
    lexer = Lexer(source, filename, sink=sink)
    return Parser(lexer.tokens(), filename, sink=sink).parse()


def check_source(
    source: str, filename: str = "<stdin>", sink: DiagnosticSink | None = None,
) -> CheckResult:
    """Run the whole front end over *source* without raising on compile errors."""
    program: Program | None = None
    try:
        program = parse_source(source, filename, sink=sink)
        scope = Checker(sink=sink).check(program)
    except CompileError as e:
        logger.debug("%s failed: %s", filename, e)
        return CheckResult(ok=False, program=program, diagnostics=list(e.diagnostics))
    return CheckResult(ok=True, program=program, scope=scope)


def check_file(path: Path, sink: DiagnosticSink | None = None) -> CheckResult:
    return check_source(path.read_text(), str(path), sink=sink)
