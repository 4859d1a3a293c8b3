"""AST node definitions for the Sprig language.

Every node shares one traversal contract: an ``operator`` token (the zero
token for purely structural nodes), ``left_operand``/``right_operand``
(``None`` when the node has no such child), ``children()`` in source order,
and ``accept(visitor, scope)`` which dispatches to the visitor method for the
node's variant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, Union

from sprig.source import Span
from sprig.tokens import ZERO_TOKEN, Token

if TYPE_CHECKING:
    from sprig.symbols import Scope

R = TypeVar("R", covariant=True)


class NodeVisitor(Protocol[R]):
    """One method per node variant; the current scope is passed explicitly."""

    def visit_program(self, node: Program, scope: Scope) -> R: ...
    def visit_variable_declaration(self, node: VariableDeclaration, scope: Scope) -> R: ...
    def visit_function_declaration(self, node: FunctionDeclaration, scope: Scope) -> R: ...
    def visit_function_parameter(self, node: FunctionParameter, scope: Scope) -> R: ...
    def visit_variable_type(self, node: VariableType, scope: Scope) -> R: ...
    def visit_variable(self, node: Variable, scope: Scope) -> R: ...
    def visit_compound_statement(self, node: CompoundStatement, scope: Scope) -> R: ...
    def visit_assignment_statement(self, node: AssignmentStatement, scope: Scope) -> R: ...
    def visit_binary_operation(self, node: BinaryOperationNode, scope: Scope) -> R: ...
    def visit_unary_operation(self, node: UnaryOperationNode, scope: Scope) -> R: ...
    def visit_integer_number(self, node: IntegerNumber, scope: Scope) -> R: ...
    def visit_float_number(self, node: FloatNumber, scope: Scope) -> R: ...
    def visit_blank_statement(self, node: BlankStatement, scope: Scope) -> R: ...


class Node:
    """Base of the closed node set."""

    span: Span

    @property
    def operator(self) -> Token:
        return ZERO_TOKEN

    @property
    def left_operand(self) -> Node | None:
        return None

    @property
    def right_operand(self) -> Node | None:
        return None

    def children(self) -> list[Node]:
        return [n for n in (self.left_operand, self.right_operand) if n is not None]

    @property
    def has_children(self) -> bool:
        return bool(self.children())

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        raise NotImplementedError


# ── Leaves ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class IntegerNumber(Node):
    token: Token
    value: int
    span: Span

    @property
    def operator(self) -> Token:
        return self.token

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_integer_number(self, scope)


@dataclass(frozen=True)
class FloatNumber(Node):
    token: Token
    value: float
    span: Span

    @property
    def operator(self) -> Token:
        return self.token

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_float_number(self, scope)


@dataclass(frozen=True)
class Variable(Node):
    token: Token
    name: str
    span: Span

    @property
    def operator(self) -> Token:
        return self.token

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_variable(self, scope)


@dataclass(frozen=True)
class VariableType(Node):
    token: Token
    span: Span

    @property
    def name(self) -> str:
        return self.token.value

    @property
    def operator(self) -> Token:
        return self.token

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_variable_type(self, scope)


@dataclass(frozen=True)
class BlankStatement(Node):
    span: Span

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_blank_statement(self, scope)


# ── Expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class BinaryOperationNode(Node):
    left: Expr
    op: Token
    right: Expr
    span: Span

    @property
    def operator(self) -> Token:
        return self.op

    @property
    def left_operand(self) -> Node:
        return self.left

    @property
    def right_operand(self) -> Node:
        return self.right

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_binary_operation(self, scope)


@dataclass(frozen=True)
class UnaryOperationNode(Node):
    op: Token
    operand: Expr
    span: Span

    @property
    def operator(self) -> Token:
        return self.op

    @property
    def right_operand(self) -> Node:
        return self.operand

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_unary_operation(self, scope)


Expr = Union[BinaryOperationNode, UnaryOperationNode, IntegerNumber, FloatNumber, Variable]


# ── Statements ───────────────────────────────────────────────────


@dataclass(frozen=True)
class AssignmentStatement(Node):
    target: Variable
    op: Token
    value: Expr
    span: Span

    @property
    def operator(self) -> Token:
        return self.op

    @property
    def left_operand(self) -> Node:
        return self.target

    @property
    def right_operand(self) -> Node:
        return self.value

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_assignment_statement(self, scope)


Stmt = Union[AssignmentStatement, BlankStatement, Expr]


@dataclass(frozen=True)
class CompoundStatement(Node):
    statements: list[Stmt]
    span: Span

    def children(self) -> list[Node]:
        return list(self.statements)

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_compound_statement(self, scope)


# ── Declarations ─────────────────────────────────────────────────


@dataclass(frozen=True)
class VariableDeclaration(Node):
    variable: Variable
    var_type: VariableType
    span: Span

    @property
    def left_operand(self) -> Node:
        return self.variable

    @property
    def right_operand(self) -> Node:
        return self.var_type

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_variable_declaration(self, scope)


@dataclass(frozen=True)
class FunctionParameter(Node):
    variable: Variable
    var_type: VariableType
    span: Span

    @property
    def left_operand(self) -> Node:
        return self.variable

    @property
    def right_operand(self) -> Node:
        return self.var_type

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_function_parameter(self, scope)


@dataclass(frozen=True)
class FunctionDeclaration(Node):
    token: Token  # the function name
    name: str
    params: list[FunctionParameter]
    body: Program
    span: Span

    @property
    def right_operand(self) -> Node:
        return self.body

    def children(self) -> list[Node]:
        return [*self.params, self.body]

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_function_declaration(self, scope)


Declaration = Union[VariableDeclaration, FunctionDeclaration]


@dataclass(frozen=True)
class Program(Node):
    declarations: list[Declaration]
    body: CompoundStatement
    span: Span

    @property
    def right_operand(self) -> Node:
        return self.body

    def children(self) -> list[Node]:
        return [*self.declarations, self.body]

    def accept(self, visitor: NodeVisitor[Any], scope: Scope) -> Any:
        return visitor.visit_program(self, scope)


# ── Rendering ────────────────────────────────────────────────────


def to_source(node: Node) -> str:
    """Render an expression or statement with every operation parenthesized."""
    if isinstance(node, BinaryOperationNode):
        spine: list[BinaryOperationNode] = []
        left: Node = node
        while isinstance(left, BinaryOperationNode):
            spine.append(left)
            left = left.left
        text = to_source(left)
        for op_node in reversed(spine):
            text = f"({text} {op_node.op.value} {to_source(op_node.right)})"
        return text
    if isinstance(node, UnaryOperationNode):
        return f"({node.op.value}{to_source(node.operand)})"
    if isinstance(node, AssignmentStatement):
        return f"{node.target.name} = {to_source(node.value)}"
    if isinstance(node, (IntegerNumber, FloatNumber)):
        return node.token.value
    if isinstance(node, Variable):
        return node.name
    if isinstance(node, BlankStatement):
        return ""
    raise TypeError(f"cannot render {type(node).__name__} as source")


def _label(node: Node) -> str:
    label = type(node).__name__
    if isinstance(node, (FunctionDeclaration, VariableType)):
        return f"{label} {node.name}"
    if node.operator.value:
        return f"{label} {node.operator.value}"
    return label


def dump_tree(node: Node, depth: int = 0) -> str:
    """Readable indented dump of a tree, one node per line."""
    lines: list[str] = []
    stack: list[tuple[Node, int]] = [(node, depth)]
    while stack:
        current, level = stack.pop()
        indent = "  " * level
        lines.append(f"{indent}{_label(current)}")
        stack.extend((child, level + 1) for child in reversed(current.children()))
    return "\n".join(lines)
