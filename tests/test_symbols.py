"""Tests for the scoped symbol table."""

from __future__ import annotations

from sprig.symbols import BUILTIN_TYPES, Scope, Symbol, SymbolCategory


def var(name: str, type_name: str = "integer") -> Symbol:
    return Symbol(name, SymbolCategory.VARIABLE, type_name=type_name)


class TestScope:
    def test_global_scope_has_builtin_types(self):
        scope = Scope.global_scope()
        for name in BUILTIN_TYPES:
            sym = scope.lookup(name)
            assert sym is not None
            assert sym.is_type
        assert scope.level == 1
        assert scope.enclosing is None

    def test_define_and_lookup(self):
        scope = Scope("global")
        scope.define(var("x"))
        assert scope.lookup("x").type_name == "integer"
        assert "x" in scope

    def test_lookup_missing(self):
        assert Scope("global").lookup("nope") is None

    def test_define_replaces(self):
        scope = Scope("global")
        scope.define(var("x", "integer"))
        scope.define(var("x", "float"))
        assert scope.lookup("x").type_name == "float"
        assert len(scope.symbols()) == 1

    def test_symbols_in_definition_order(self):
        scope = Scope("global")
        for name in ("b", "a", "c"):
            scope.define(var(name))
        assert [s.name for s in scope.symbols()] == ["b", "a", "c"]


class TestScopeChain:
    def test_child_level(self):
        outer = Scope.global_scope()
        inner = outer.child("f").child("g")
        assert inner.level == 3
        assert inner.enclosing.name == "f"

    def test_lookup_walks_outward(self):
        outer = Scope.global_scope()
        outer.define(var("x"))
        inner = outer.child("f").child("g")
        assert inner.lookup("x") is outer.lookup("x")

    def test_current_scope_only(self):
        outer = Scope.global_scope()
        outer.define(var("x"))
        inner = outer.child("f")
        assert inner.lookup("x", current_scope_only=True) is None
        assert "x" not in inner

    def test_inner_shadows_outer(self):
        outer = Scope.global_scope()
        outer.define(var("x", "integer"))
        inner = outer.child("f")
        inner.define(var("x", "float"))
        assert inner.lookup("x").type_name == "float"
        assert outer.lookup("x").type_name == "integer"

    def test_child_definitions_invisible_outside(self):
        outer = Scope.global_scope()
        outer.child("f").define(var("y"))
        assert outer.lookup("y") is None

    def test_self_enclosing_scope_terminates(self):
        scope = Scope("odd")
        scope.enclosing = scope
        assert scope.lookup("missing") is None


class TestSymbol:
    def test_categories(self):
        assert var("x").is_value
        assert Symbol("p", SymbolCategory.PARAMETER, "float").is_value
        assert not Symbol("f", SymbolCategory.FUNCTION).is_value
        assert not Symbol("f", SymbolCategory.FUNCTION).is_type
