# witnesskit/__init__.py
"""
witnesskit - Protocol witnesses for Python.

Turns an interface (a named set of method and property requirements) into a
witness: a generic record of plain functions over an explicit subject type.
Witnesses are ordinary values that can be built, passed around, transformed
with map / pullback / iso, and registered for lookup by subject type.

Quick Start:
    >>> from witnesskit import InterfaceSchema, MethodRequirement, Parameter, SELF, WitnessGenerator
    >>> combinable = InterfaceSchema(
    ...     name="Combinable",
    ...     requirements=[
    ...         MethodRequirement("combine", (Parameter(SELF, name="other"),), return_type=SELF),
    ...     ],
    ... )
    >>> CombinableWitness = WitnessGenerator().materialize(combinable)
    >>> int_sum = CombinableWitness(combine=lambda a, b: a + b)
    >>> int_sum.iso(to=int, from_=str).combine("1", "2")
    '3'

Public API:
    Schema:
        - InterfaceSchema, MethodRequirement, PropertyRequirement
        - Parameter, AssociatedType, AccessLevel, GenerationOption
        - load_schema_file: YAML interface documents

    Generation:
        - WitnessGenerator: emit, transform, render, materialize
        - emit / emit_transforms: the individual stages

    Runtime:
        - Witness, build_witness_class
        - register / lookup: process-wide witness registry

Architecture:
    witnesskit/
    ├── core/       # Type expressions, schemas, errors, settings
    ├── codegen/    # Variance analysis, emitters, renderer
    ├── runtime/    # Witness classes, converters, registry
    ├── schema/     # YAML interface documents
    └── cli/        # witnesskit command
"""

__version__ = "0.1.0"

from witnesskit.codegen import (
    GenerationFailure,
    GenerationReport,
    TransformKind,
    Variance,
    WitnessGenerator,
    WitnessSpec,
    emit,
    emit_transforms,
    render_module,
)
from witnesskit.core import (
    SELF,
    VOID,
    AccessLevel,
    AssociatedType,
    FunctionType,
    GenerationOption,
    GenericType,
    GeneratorSettings,
    InterfaceSchema,
    MethodRequirement,
    OptionalType,
    Parameter,
    PropertyRequirement,
    SchemaError,
    TupleType,
    TypeIdentifier,
    UnsupportedRequirementError,
    WitnessError,
)
from witnesskit.runtime import (
    Witness,
    WitnessLookupTable,
    WitnessRegistry,
    build_witness_class,
    get_witness_registry,
    lookup,
    register,
)
from witnesskit.schema import load_schema_file, parse_type

__all__ = [
    "__version__",
    # Schema
    "InterfaceSchema",
    "MethodRequirement",
    "PropertyRequirement",
    "Parameter",
    "AssociatedType",
    "AccessLevel",
    "GenerationOption",
    "TypeIdentifier",
    "GenericType",
    "FunctionType",
    "TupleType",
    "OptionalType",
    "SELF",
    "VOID",
    "load_schema_file",
    "parse_type",
    # Generation
    "GeneratorSettings",
    "WitnessGenerator",
    "WitnessSpec",
    "GenerationReport",
    "GenerationFailure",
    "TransformKind",
    "Variance",
    "emit",
    "emit_transforms",
    "render_module",
    # Runtime
    "Witness",
    "build_witness_class",
    "WitnessRegistry",
    "WitnessLookupTable",
    "get_witness_registry",
    "register",
    "lookup",
    # Errors
    "WitnessError",
    "SchemaError",
    "UnsupportedRequirementError",
]
