# tests/test_emitter.py
"""
Tests for the witness emitter.

Verifies:
1. One field per requirement, receiver made explicit, Self replaced by A
2. Nested witnesses for witnessed associated types
3. Transformer kind, including promotion for receivers
4. Naming, access levels and options
5. All-or-nothing failures with interface and requirement named
"""

import dataclasses

import pytest

from witnesskit.codegen.emitter import FieldKind, emit, lower_camel, witness_struct_name
from witnesskit.codegen.variance import TransformKind, Variance
from witnesskit.core.config import GeneratorSettings
from witnesskit.core.exceptions import SchemaError, UnsupportedRequirementError
from witnesskit.core.schema import (
    AccessLevel,
    AssociatedType,
    GenerationOption,
    InterfaceSchema,
    MethodRequirement,
    Parameter,
    PropertyRequirement,
)
from witnesskit.core.types import SELF, TypeIdentifier

pytestmark = pytest.mark.tier1


class TestCombinable:
    """The Combinable scenario."""

    def test_struct_and_generics(self, combinable):
        spec = emit(combinable)
        assert spec.struct_name == "CombinableWitness"
        assert spec.generic_parameters == ("A",)

    def test_single_combine_field(self, combinable):
        spec = emit(combinable)
        assert [f.name for f in spec.fields] == ["combine"]
        assert str(spec.fields[0].type) == "(A, A) -> A"
        assert spec.fields[0].variance is Variance.INVARIANT

    def test_constructor_takes_combine(self, combinable):
        spec = emit(combinable)
        assert [name for name, _ in spec.constructor_parameters] == ["combine"]

    def test_iso_not_map(self, combinable):
        assert emit(combinable).transform_kind is TransformKind.ISO


class TestComparable:
    """The Comparable scenario."""

    def test_compare_field(self, comparable):
        spec = emit(comparable)
        assert str(spec.field_named("compare").type) == "(A, A) -> Bool"

    def test_pullback(self, comparable):
        assert emit(comparable).transform_kind is TransformKind.PULLBACK


class TestFieldShapes:
    """Method and property field construction."""

    def test_static_method_has_no_receiver(self, diffable):
        spec = emit(diffable)
        assert str(spec.field_named("diff").type) == "(A, A) -> (String, [String])?"

    def test_instance_property_takes_receiver(self, diffable):
        data = emit(diffable).field_named("data")
        assert data.kind is FieldKind.PROPERTY
        assert str(data.type) == "(A) -> Data"
        assert data.takes_receiver

    def test_static_property_is_thunk(self, snapshottable):
        field = emit(snapshottable).field_named("pathExtension")
        assert str(field.type) == "() -> String"
        assert field.is_static

    def test_missing_return_is_void(self):
        schema = InterfaceSchema(
            name="Appendable",
            requirements=(
                MethodRequirement("append", (Parameter(SELF),), is_mutating=True),
            ),
        )
        field = emit(schema).field_named("append")
        assert str(field.type) == "(A, A) -> Void"
        assert field.is_mutating

    def test_keyword_names_are_escaped(self, diffable):
        spec = emit(diffable)
        assert [f.name for f in spec.fields] == ["diff", "data", "from_"]
        assert spec.field_named("from_").requirement.name == "from"

    def test_custom_labels(self, comparable):
        settings = GeneratorSettings(subject_label="Value", witness_suffix="Witnessing")
        spec = emit(comparable, settings)
        assert spec.struct_name == "ComparableWitnessing"
        assert str(spec.fields[0].type) == "(Value, Value) -> Bool"


class TestAssociatedTypes:
    """Generic parameters and nested witnesses."""

    def test_nested_field_comes_first(self, snapshottable):
        spec = emit(snapshottable)
        assert [f.name for f in spec.fields] == ["format", "pathExtension", "snapshot"]
        nested = spec.fields[0]
        assert nested.kind is FieldKind.NESTED
        assert str(nested.type) == "DiffableWitness<Format>"

    def test_generic_parameters(self, snapshottable):
        assert emit(snapshottable).generic_parameters == ("A", "Format")

    def test_unconstrained_associated_type_has_no_nested_field(self):
        convertible = InterfaceSchema(
            name="Convertible",
            associated_types=(AssociatedType("To"),),
            requirements=(MethodRequirement("convert", return_type=TypeIdentifier("To")),),
        )
        spec = emit(convertible)
        assert spec.generic_parameters == ("A", "To")
        assert [f.name for f in spec.fields] == ["convert"]

    def test_unused_associated_type_is_dropped(self, diffable):
        schema = InterfaceSchema(
            name="Tagged",
            associated_types=(AssociatedType("Tag", constraint=diffable),),
            requirements=(MethodRequirement("describe", return_type=TypeIdentifier("String")),),
        )
        spec = emit(schema)
        assert spec.generic_parameters == ("A",)
        assert spec.fields[0].name == "describe"

    def test_associated_type_shadowing_subject_label(self):
        schema = InterfaceSchema(
            name="Shadow",
            associated_types=(AssociatedType("A"),),
            requirements=(MethodRequirement("get", return_type=TypeIdentifier("A")),),
        )
        with pytest.raises(SchemaError, match="clashes"):
            emit(schema)

    def test_lower_camel(self):
        assert lower_camel("Format") == "format"
        assert lower_camel("URLSession") == "urlSession"
        assert lower_camel("ID") == "id"


class TestTransformKind:
    """Witness-level transformer choice."""

    def test_absent_subject_gets_none(self, randomizable):
        assert emit(randomizable).transform_kind is TransformKind.NONE

    def test_static_covariant_keeps_map(self):
        schema = InterfaceSchema(
            name="Decodable",
            requirements=(
                MethodRequirement(
                    "from", (Parameter(TypeIdentifier("Data")),), return_type=SELF, is_static=True
                ),
            ),
        )
        assert emit(schema).transform_kind is TransformKind.MAP

    def test_instance_covariant_is_promoted(self):
        """The receiver needs converting from B to A, which map cannot do."""
        schema = InterfaceSchema(
            name="Copyable",
            requirements=(MethodRequirement("copy", return_type=SELF),),
        )
        assert emit(schema).transform_kind is TransformKind.ISO

    def test_diffable_is_iso(self, diffable):
        assert emit(diffable).transform_kind is TransformKind.ISO


class TestAccessAndOptions:
    """Access levels and generation options."""

    def test_default_access_resolves_to_internal(self, combinable):
        assert emit(combinable).access_level is AccessLevel.INTERNAL

    def test_explicit_access_is_kept(self, randomizable):
        assert emit(randomizable).access_level is AccessLevel.PRIVATE

    def test_access_given_as_string(self):
        schema = InterfaceSchema(name="Shown", access_level="public")
        assert schema.access_level is AccessLevel.PUBLIC
        assert emit(schema).access_level is AccessLevel.PUBLIC

    def test_unknown_access_string(self):
        with pytest.raises(SchemaError, match="access level"):
            InterfaceSchema(name="Hidden", access_level="protected")

    def test_schema_options(self, monoid):
        assert emit(monoid).has_option(GenerationOption.UTILITIES)

    def test_settings_default_options_are_merged(self, combinable):
        settings = GeneratorSettings(default_options=["conformanceInit", "bogus"])
        spec = emit(combinable, settings)
        assert spec.options == frozenset({GenerationOption.CONFORMANCE_INIT})

    def test_witness_struct_name(self):
        assert witness_struct_name("Hashable") == "HashableWitness"


class TestFailures:
    """Emission is all-or-nothing."""

    def test_empty_interface_is_valid(self):
        spec = emit(InterfaceSchema(name="Marker"))
        assert spec.fields == ()
        assert spec.transform_kind is TransformKind.NONE

    def test_unknown_requirement_shape(self, combinable):
        schema = dataclasses.replace(combinable, requirements=combinable.requirements + ("subscript",))
        with pytest.raises(UnsupportedRequirementError) as exc_info:
            emit(schema)
        assert exc_info.value.interface == "Combinable"

    def test_raw_string_type(self):
        schema = InterfaceSchema(
            name="Broken",
            requirements=(PropertyRequirement("value", "Self"),),
        )
        with pytest.raises(SchemaError) as exc_info:
            emit(schema)
        assert exc_info.value.requirement == "value"

    def test_duplicate_field_names(self):
        schema = InterfaceSchema(
            name="Twice",
            requirements=(
                MethodRequirement("size", return_type=TypeIdentifier("Int")),
                PropertyRequirement("size", TypeIdentifier("Int")),
            ),
        )
        with pytest.raises(SchemaError, match="duplicate"):
            emit(schema)

    def test_field_clashing_with_transformer(self):
        schema = InterfaceSchema(
            name="Mappable",
            requirements=(MethodRequirement("iso", (Parameter(SELF),), return_type=SELF),),
        )
        with pytest.raises(SchemaError, match="clashes"):
            emit(schema)

    def test_field_clashing_with_witness_member(self):
        schema = InterfaceSchema(
            name="Registrable",
            requirements=(MethodRequirement("register", return_type=TypeIdentifier("Bool")),),
        )
        with pytest.raises(SchemaError):
            emit(schema)
