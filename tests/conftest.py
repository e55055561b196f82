# tests/conftest.py
"""
Shared fixtures: the interfaces used throughout the suite, built in code.

Test Tiers:
- tier1: pure logic, no I/O
         Run: pytest -m tier1
- tier2: tests touching files or the CLI
"""

from __future__ import annotations

from pathlib import Path

import pytest

from witnesskit.core.schema import (
    AccessLevel,
    AssociatedType,
    GenerationOption,
    InterfaceSchema,
    MethodRequirement,
    Parameter,
    PropertyRequirement,
)
from witnesskit.core.types import SELF, GenericType, OptionalType, TupleType, TypeIdentifier
from witnesskit.runtime.registry import WitnessRegistry

BOOL = TypeIdentifier("Bool")
STRING = TypeIdentifier("String")
DATA = TypeIdentifier("Data")
DOUBLE = TypeIdentifier("Double")

EXAMPLES_FILE = Path(__file__).resolve().parent.parent / "examples" / "witnesses.yaml"


def make_combinable(**kwargs) -> InterfaceSchema:
    return InterfaceSchema(
        name="Combinable",
        requirements=(
            MethodRequirement("combine", (Parameter(SELF, name="other"),), return_type=SELF),
        ),
        **kwargs,
    )


def make_comparable(**kwargs) -> InterfaceSchema:
    return InterfaceSchema(
        name="Comparable",
        requirements=(
            MethodRequirement("compare", (Parameter(SELF, name="other"),), return_type=BOOL),
        ),
        **kwargs,
    )


def make_diffable(**kwargs) -> InterfaceSchema:
    return InterfaceSchema(
        name="Diffable",
        requirements=(
            MethodRequirement(
                "diff",
                (Parameter(SELF, label="old"), Parameter(SELF, label="new")),
                return_type=OptionalType(
                    TupleType((STRING, GenericType("Array", (STRING,))))
                ),
                is_static=True,
            ),
            PropertyRequirement("data", DATA),
            MethodRequirement(
                "from",
                (Parameter(DATA, label="data"),),
                return_type=SELF,
                is_static=True,
            ),
        ),
        **kwargs,
    )


def make_snapshottable(diffable: InterfaceSchema, **kwargs) -> InterfaceSchema:
    return InterfaceSchema(
        name="Snapshottable",
        associated_types=(
            AssociatedType("Format", constraint=diffable, constraint_name="Diffable"),
        ),
        requirements=(
            PropertyRequirement("pathExtension", STRING, is_static=True),
            PropertyRequirement("snapshot", TypeIdentifier("Format")),
        ),
        **kwargs,
    )


def make_monoid(**kwargs) -> InterfaceSchema:
    return InterfaceSchema(
        name="Monoid",
        requirements=(
            MethodRequirement("empty", return_type=SELF, is_static=True),
            MethodRequirement(
                "combine",
                (Parameter(SELF), Parameter(SELF)),
                return_type=SELF,
                is_static=True,
            ),
        ),
        options=frozenset({GenerationOption.UTILITIES}),
        **kwargs,
    )


@pytest.fixture
def combinable() -> InterfaceSchema:
    return make_combinable()


@pytest.fixture
def comparable() -> InterfaceSchema:
    return make_comparable()


@pytest.fixture
def diffable() -> InterfaceSchema:
    return make_diffable()


@pytest.fixture
def snapshottable(diffable) -> InterfaceSchema:
    return make_snapshottable(diffable)


@pytest.fixture
def monoid() -> InterfaceSchema:
    return make_monoid()


@pytest.fixture
def randomizable() -> InterfaceSchema:
    """Subject never used: `static func random() -> Double`."""
    return InterfaceSchema(
        name="Randomizable",
        requirements=(MethodRequirement("random", return_type=DOUBLE, is_static=True),),
        access_level=AccessLevel.PRIVATE,
    )


@pytest.fixture
def registry() -> WitnessRegistry:
    """A fresh registry, isolated from the process-wide one."""
    return WitnessRegistry()


@pytest.fixture
def examples_file() -> Path:
    return EXAMPLES_FILE
