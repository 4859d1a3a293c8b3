"""Scoped semantic analyzer for the Sprig language.

A single depth-first pass over the AST that declares names in the current
scope and validates every reference against the scope chain. The scope is
passed explicitly to each ``visit_*`` method; a function body is analyzed
in a child scope that is dropped when the body is done. The first error
aborts the analysis.
"""

from __future__ import annotations

from typing import NoReturn

from sprig.ast_nodes import (
    AssignmentStatement,
    BinaryOperationNode,
    BlankStatement,
    CompoundStatement,
    Expr,
    FloatNumber,
    FunctionDeclaration,
    FunctionParameter,
    IntegerNumber,
    Program,
    UnaryOperationNode,
    Variable,
    VariableDeclaration,
    VariableType,
)
from sprig.errors import (
    Diagnostic,
    DiagnosticSink,
    DuplicateDeclarationError,
    NotATypeError,
    SemanticError,
    UndefinedReferenceError,
)
from sprig.log import get_logger
from sprig.source import Span
from sprig.symbols import Scope, Symbol, SymbolCategory

logger = get_logger(__name__)


class Checker:
    """Semantic analyzer for one program."""

    def __init__(self, sink: DiagnosticSink | None = None) -> None:
        self.sink = sink

    # ── Public API ──────────────────────────────────────────────

    def check(self, program: Program, scope: Scope | None = None) -> Scope:
        """Analyze *program* in *scope* (a fresh global scope by default).

        Returns the scope the program was analyzed in. Raises a
        :class:`~sprig.errors.SemanticError` subclass on the first problem.
        """
        if scope is None:
            scope = Scope.global_scope()
        program.accept(self, scope)
        return scope

    # ── Error helpers ───────────────────────────────────────────

    def _fail(
        self, error: type[SemanticError], message: str, name: str, span: Span,
    ) -> NoReturn:
        diag = Diagnostic.error(error.code, message, span)
        if self.sink is not None:
            self.sink(diag)
        raise error(diag, name)

    def _declare(self, scope: Scope, symbol: Symbol) -> None:
        """Define *symbol* unless its name is already bound in *scope* itself."""
        existing = scope.lookup(symbol.name, current_scope_only=True)
        if existing is not None:
            self._fail(
                DuplicateDeclarationError,
                f"duplicate declaration of '{symbol.name}' in scope '{scope.name}'",
                symbol.name, symbol.span,
            )
        scope.define(symbol)

    def _resolve_type(self, var_type: VariableType, scope: Scope) -> str:
        type_symbol = scope.lookup(var_type.name)
        if type_symbol is None or not type_symbol.is_type:
            self._fail(
                NotATypeError,
                f"'{var_type.name}' is not a type",
                var_type.name, var_type.span,
            )
        return type_symbol.name

    # ── Declarations ────────────────────────────────────────────

    def visit_program(self, node: Program, scope: Scope) -> None:
        for decl in node.declarations:
            decl.accept(self, scope)
        node.body.accept(self, scope)

    def visit_variable_declaration(self, node: VariableDeclaration, scope: Scope) -> None:
        type_name = self._resolve_type(node.var_type, scope)
        self._declare(scope, Symbol(
            name=node.variable.name, category=SymbolCategory.VARIABLE,
            type_name=type_name, span=node.variable.span,
        ))

    def visit_function_parameter(self, node: FunctionParameter, scope: Scope) -> Symbol:
        """Resolve a parameter into its symbol; the caller decides where it lives."""
        return Symbol(
            name=node.variable.name, category=SymbolCategory.PARAMETER,
            type_name=self._resolve_type(node.var_type, scope),
            span=node.variable.span,
        )

    def visit_function_declaration(self, node: FunctionDeclaration, scope: Scope) -> None:
        params = [p.accept(self, scope) for p in node.params]
        self._declare(scope, Symbol(
            name=node.name, category=SymbolCategory.FUNCTION,
            params=params, span=node.token.span,
        ))

        function_scope = scope.child(node.name)
        for param in params:
            self._declare(function_scope, param)
        node.body.accept(self, function_scope)
        logger.debug(
            "leaving scope %s (%d symbol(s))",
            function_scope.name, len(function_scope.symbols()),
        )

    def visit_variable_type(self, node: VariableType, scope: Scope) -> None:
        pass

    # ── Statements ──────────────────────────────────────────────

    def visit_compound_statement(self, node: CompoundStatement, scope: Scope) -> None:
        for stmt in node.statements:
            stmt.accept(self, scope)

    def visit_assignment_statement(self, node: AssignmentStatement, scope: Scope) -> None:
        node.target.accept(self, scope)
        node.value.accept(self, scope)

    def visit_blank_statement(self, node: BlankStatement, scope: Scope) -> None:
        pass

    # ── Expressions ─────────────────────────────────────────────

    def visit_binary_operation(self, node: BinaryOperationNode, scope: Scope) -> None:
        # Walk the left spine iteratively; long sums nest only to the left.
        rights: list[Expr] = []
        left: Expr = node
        while isinstance(left, BinaryOperationNode):
            rights.append(left.right)
            left = left.left
        left.accept(self, scope)
        for right in reversed(rights):
            right.accept(self, scope)

    def visit_unary_operation(self, node: UnaryOperationNode, scope: Scope) -> None:
        node.operand.accept(self, scope)

    def visit_variable(self, node: Variable, scope: Scope) -> None:
        symbol = scope.lookup(node.name)
        if symbol is None or not symbol.is_value:
            self._fail(
                UndefinedReferenceError,
                f"undefined variable '{node.name}'",
                node.name, node.span,
            )

    def visit_integer_number(self, node: IntegerNumber, scope: Scope) -> None:
        pass

    def visit_float_number(self, node: FloatNumber, scope: Scope) -> None:
        pass
