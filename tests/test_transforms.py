# tests/test_transforms.py
"""
Tests for transformer planning.

Verifies:
1. Structural conversion plans (optional, tuple, collections, callbacks)
2. Per-field rewrites: arguments through `to`, results through `from`
3. One transformer per witness, none when the subject is unused
"""

import pytest

from witnesskit.codegen.emitter import emit
from witnesskit.codegen.transforms import (
    IDENTITY,
    ConversionKind,
    Direction,
    emit_transforms,
    plan_conversion,
)
from witnesskit.codegen.variance import TransformKind
from witnesskit.core.exceptions import UnsupportedRequirementError
from witnesskit.core.schema import InterfaceSchema, MethodRequirement, Parameter
from witnesskit.core.types import (
    SELF,
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeIdentifier,
)

pytestmark = pytest.mark.tier1

A = TypeIdentifier("A")
INT = TypeIdentifier("Int")


def transforms_for(schema):
    return emit_transforms(schema, emit(schema))


class TestPlanConversion:
    """plan_conversion() mirrors the shape of the type."""

    def test_unrelated_is_identity(self):
        assert plan_conversion(INT, "A", Direction.FROM) is IDENTITY

    def test_bare_subject_applies(self):
        conversion = plan_conversion(A, "A", Direction.TO)
        assert conversion.kind is ConversionKind.APPLY
        assert conversion.direction is Direction.TO

    def test_optional(self):
        conversion = plan_conversion(OptionalType(A), "A", Direction.FROM)
        assert conversion.kind is ConversionKind.OPTIONAL
        assert conversion.children[0].kind is ConversionKind.APPLY

    def test_tuple_keeps_unrelated_elements(self):
        conversion = plan_conversion(TupleType((INT, A)), "A", Direction.FROM)
        assert conversion.kind is ConversionKind.TUPLE
        assert conversion.children[0] is IDENTITY
        assert conversion.children[1].kind is ConversionKind.APPLY

    @pytest.mark.parametrize(
        "name, container",
        [("Array", "list"), ("Set", "set"), ("FrozenSet", "frozenset")],
    )
    def test_sequences(self, name, container):
        conversion = plan_conversion(GenericType(name, (A,)), "A", Direction.FROM)
        assert conversion.kind is ConversionKind.SEQUENCE
        assert conversion.container == container

    def test_mapping_values(self):
        conversion = plan_conversion(
            GenericType("Dictionary", (TypeIdentifier("String"), A)), "A", Direction.FROM
        )
        assert conversion.kind is ConversionKind.MAPPING
        assert conversion.children[0] is IDENTITY

    def test_callback_flips_parameter_direction(self):
        conversion = plan_conversion(FunctionType((A,), A), "A", Direction.FROM)
        assert conversion.kind is ConversionKind.FUNCTION
        parameter, result = conversion.children
        assert parameter.direction is Direction.TO
        assert result.direction is Direction.FROM

    def test_unknown_generic_is_unsupported(self):
        with pytest.raises(UnsupportedRequirementError):
            plan_conversion(GenericType("Future", (A,)), "A", Direction.FROM)


class TestComparablePullback:
    """Comparable gets exactly one pullback."""

    def test_single_pullback(self, comparable):
        transforms = transforms_for(comparable)
        assert [t.kind for t in transforms] == [TransformKind.PULLBACK]
        transform = transforms[0]
        assert transform.name == "pullback"
        assert [p.name for p in transform.parameters] == ["transform"]
        assert str(transform.parameters[0].type) == "(B) -> A"

    def test_both_arguments_pulled_back(self, comparable):
        rewrite = transforms_for(comparable)[0].rewrites[0]
        assert [a.direction for a in rewrite.arguments] == [Direction.TO, Direction.TO]
        assert rewrite.result is IDENTITY

    def test_result_type(self, comparable):
        assert str(transforms_for(comparable)[0].result_type) == "ComparableWitness<B>"


class TestCombinableIso:
    """Combinable gets iso, never map."""

    def test_single_iso(self, combinable):
        transforms = transforms_for(combinable)
        assert [t.name for t in transforms] == ["iso"]
        assert [p.name for p in transforms[0].parameters] == ["to", "from_"]

    def test_rewrite(self, combinable):
        rewrite = transforms_for(combinable)[0].rewrites[0]
        assert [a.direction for a in rewrite.arguments] == [Direction.TO, Direction.TO]
        assert rewrite.result.direction is Direction.FROM


class TestRewrites:
    """Field rewrites across witness shapes."""

    def test_none_emits_nothing(self, randomizable):
        assert transforms_for(randomizable) == ()

    def test_unrelated_field_is_passthrough(self, diffable):
        rewrites = {r.field: r for r in transforms_for(diffable)[0].rewrites}
        assert not rewrites["data"].is_passthrough  # receiver still converted
        assert rewrites["from_"].arguments == (IDENTITY,)
        assert rewrites["from_"].result.direction is Direction.FROM

    def test_nested_field_is_passthrough(self, snapshottable):
        transform = transforms_for(snapshottable)[0]
        nested = transform.rewrites[0]
        assert nested.field == "format"
        assert nested.is_passthrough
        assert str(transform.result_type) == "SnapshottableWitness<B, Format>"

    def test_static_thunk_is_passthrough(self, snapshottable):
        rewrites = {r.field: r for r in transforms_for(snapshottable)[0].rewrites}
        assert rewrites["pathExtension"].is_passthrough

    def test_unsupported_container_names_requirement(self):
        schema = InterfaceSchema(
            name="Async",
            requirements=(
                MethodRequirement(
                    "load", return_type=GenericType("Future", (SELF,)), is_static=True
                ),
            ),
        )
        with pytest.raises(UnsupportedRequirementError) as exc_info:
            transforms_for(schema)
        assert exc_info.value.interface == "Async"
        assert exc_info.value.requirement == "load"
