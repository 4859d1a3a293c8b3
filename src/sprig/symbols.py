"""Scoped symbol table for the Sprig semantic analyzer.

Scopes form a chain that mirrors the lexical nesting of function
declarations: the global scope has no enclosing scope, and each function
body gets a child of the scope its declaration appears in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from sprig.log import get_logger
from sprig.source import BUILTIN_SPAN, Span

logger = get_logger(__name__)

BUILTIN_TYPES = ("integer", "float")


class SymbolCategory(Enum):
    BUILTIN_TYPE = auto()
    VARIABLE = auto()
    PARAMETER = auto()
    FUNCTION = auto()


@dataclass
class Symbol:
    name: str
    category: SymbolCategory
    type_name: str | None = None
    params: list[Symbol] = field(default_factory=list)
    span: Span = BUILTIN_SPAN

    @property
    def is_type(self) -> bool:
        return self.category is SymbolCategory.BUILTIN_TYPE

    @property
    def is_value(self) -> bool:
        return self.category in (SymbolCategory.VARIABLE, SymbolCategory.PARAMETER)


class Scope:
    """A single lexical scope level."""

    def __init__(self, name: str, enclosing: Scope | None = None) -> None:
        self.name = name
        self.enclosing = enclosing
        self.level = 1 if enclosing is None else enclosing.level + 1
        self._symbols: dict[str, Symbol] = {}

    def __repr__(self) -> str:
        return f"Scope({self.name!r}, level={self.level}, symbols={list(self._symbols)})"

    @classmethod
    def global_scope(cls) -> Scope:
        """The outermost scope, seeded with the built-in type symbols."""
        scope = cls("global")
        for name in BUILTIN_TYPES:
            scope.define(Symbol(name, SymbolCategory.BUILTIN_TYPE, type_name=name))
        return scope

    def child(self, name: str) -> Scope:
        """A new scope nested directly inside this one."""
        scope = Scope(name, enclosing=self)
        logger.debug("entering scope %s at level %d", name, scope.level)
        return scope

    def define(self, symbol: Symbol) -> None:
        """Bind *symbol* in this scope, replacing any binding of the same name here.

        Callers that must reject redeclarations check
        ``lookup(name, current_scope_only=True)`` first.
        """
        self._symbols[symbol.name] = symbol
        logger.debug(
            "defined %s %s in scope %s",
            symbol.category.name.lower(), symbol.name, self.name,
        )

    def lookup(self, name: str, current_scope_only: bool = False) -> Symbol | None:
        """Find *name* here, then (unless restricted) in each enclosing scope."""
        sym = self._symbols.get(name)
        if sym is not None or current_scope_only:
            return sym
        if self.enclosing is None or self.enclosing is self:
            return None
        return self.enclosing.lookup(name)

    def symbols(self) -> list[Symbol]:
        """All symbols defined directly in this scope, in definition order."""
        return list(self._symbols.values())

    def __contains__(self, name: str) -> bool:
        return name in self._symbols
