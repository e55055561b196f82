# tests/test_types.py
"""
Tests for structured type expressions.

Verifies:
1. Rendering in the neutral notation
2. Walking, mention checks and substitution
3. Non-expressions are rejected with SchemaError
"""

import pytest

from witnesskit.core.exceptions import SchemaError
from witnesskit.core.types import (
    SELF,
    VOID,
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeIdentifier,
    children,
    identifiers,
    mentions,
    substitute,
    walk_type,
)

pytestmark = pytest.mark.tier1

A = TypeIdentifier("A")
INT = TypeIdentifier("Int")


class TestRendering:
    """str() of type expressions."""

    def test_function(self):
        assert str(FunctionType((A, A), TypeIdentifier("Bool"))) == "(A, A) -> Bool"

    def test_array_and_dictionary_sugar(self):
        assert str(GenericType("Array", (A,))) == "[A]"
        assert str(GenericType("Dictionary", (TypeIdentifier("String"), A))) == "[String: A]"

    def test_other_generic(self):
        assert str(GenericType("Result", (A, INT))) == "Result<A, Int>"

    def test_void(self):
        assert str(VOID) == "Void"
        assert VOID.is_void

    def test_optional_function_is_parenthesized(self):
        assert str(OptionalType(FunctionType((), A))) == "(() -> A)?"


class TestWalking:
    """walk_type / identifiers / mentions."""

    def test_walk_is_depth_first(self):
        t = FunctionType((GenericType("Array", (A,)),), OptionalType(INT))
        names = [type(n).__name__ for n in walk_type(t)]
        assert names == [
            "FunctionType",
            "GenericType",
            "TypeIdentifier",
            "OptionalType",
            "TypeIdentifier",
        ]

    def test_identifiers_include_generic_heads(self):
        t = GenericType("Dictionary", (TypeIdentifier("String"), A))
        assert list(identifiers(t)) == ["Dictionary", "String", "A"]

    def test_mentions_nested(self):
        t = TupleType((INT, OptionalType(GenericType("Array", (SELF,)))))
        assert mentions(t, {"Self"})
        assert not mentions(t, {"Format"})

    def test_children_rejects_raw_strings(self):
        with pytest.raises(SchemaError):
            children("Self")

    def test_walk_rejects_nested_raw_strings(self):
        with pytest.raises(SchemaError):
            list(walk_type(GenericType("Array", ("Self",))))


class TestSubstitute:
    """substitute() replaces identifiers everywhere."""

    def test_replaces_self(self):
        t = FunctionType((SELF, GenericType("Array", (SELF,))), OptionalType(SELF))
        assert str(substitute(t, {"Self": A})) == "(A, [A]) -> A?"

    def test_leaves_generic_heads_alone(self):
        t = GenericType("Self", (INT,))
        assert substitute(t, {"Self": A}) == t

    def test_original_is_untouched(self):
        t = TupleType((SELF,))
        substitute(t, {"Self": A})
        assert t.elements == (SELF,)
