# witnesskit/codegen/utilities.py
"""
Extra members derived from generation options.

utilities:
    Every field shaped like a binary operation, ``(A, A) -> A``, gets a
    ``fold_<field>`` helper that reduces a sequence with it. When the witness
    also has an identity element, a field shaped ``() -> A``, the fold starts
    from it (the monoid case):

        [1, 2, 3] folded with sum  ->  6

conformanceInit:
    A ``from_conformance(conforming, **nested)`` constructor that wires each
    field to the same-named member of a conforming type or its values.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from witnesskit.codegen.emitter import FieldKind, WitnessField, WitnessSpec
from witnesskit.core.schema import GenerationOption
from witnesskit.core.types import FunctionType, TypeIdentifier

CONFORMANCE_INIT_NAME = "from_conformance"

# Names the generated conformance closures use themselves.
_BINDING_NAMES = frozenset({"subject", "conforming", "cls", "self"})


@dataclass(frozen=True)
class FoldHelper:
    """``fold_<operation>(values, initial=...)``"""

    name: str
    operation: str
    identity: Optional[str] = None


class BindingKind(str, Enum):
    NESTED = "nested"
    INSTANCE_METHOD = "instance_method"
    STATIC_METHOD = "static_method"
    INSTANCE_PROPERTY = "instance_property"
    STATIC_PROPERTY = "static_property"


@dataclass(frozen=True)
class ConformanceBinding:
    """How one field is wired to a conforming type."""

    field: str
    kind: BindingKind
    member: str
    parameters: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ConformanceInit:
    name: str
    bindings: Tuple[ConformanceBinding, ...]

    @property
    def nested_fields(self) -> Tuple[str, ...]:
        return tuple(b.field for b in self.bindings if b.kind is BindingKind.NESTED)


# =============================================================================
# Shapes
# =============================================================================


def is_binary_operation(field: WitnessField, subject: str) -> bool:
    a = TypeIdentifier(subject)
    return field.is_function and field.type == FunctionType((a, a), a)


def is_identity_element(field: WitnessField, subject: str) -> bool:
    return field.is_function and field.type == FunctionType((), TypeIdentifier(subject))


def fold_helpers(spec: WitnessSpec) -> Tuple[FoldHelper, ...]:
    """Fold helpers for a witness, empty unless ``utilities`` is requested."""
    if not spec.has_option(GenerationOption.UTILITIES):
        return ()

    identities = [f.name for f in spec.fields if is_identity_element(f, spec.subject)]
    identity = identities[0] if len(identities) == 1 else None

    taken = {f.name for f in spec.fields}
    helpers = []
    for f in spec.fields:
        if not is_binary_operation(f, spec.subject):
            continue
        name = f"fold_{f.name}"
        if name in taken:
            continue
        helpers.append(FoldHelper(name=name, operation=f.name, identity=identity))
    return tuple(helpers)


# =============================================================================
# Conformance Init
# =============================================================================


def _parameter_names(field: WitnessField) -> Tuple[str, ...]:
    requirement = field.requirement
    names = []
    for index, parameter in enumerate(getattr(requirement, "parameters", ())):
        candidate = parameter.display_name
        if (
            not candidate.isidentifier()
            or keyword.iskeyword(candidate)
            or candidate in names
            or candidate in _BINDING_NAMES
        ):
            candidate = f"arg{index}"
        names.append(candidate)
    return tuple(names)


def _member(field: WitnessField) -> str:
    """Name of the conforming member, before keyword escaping."""
    requirement = field.requirement
    return requirement.name if requirement is not None else field.name


def _binding(field: WitnessField) -> ConformanceBinding:
    if field.kind is FieldKind.NESTED:
        return ConformanceBinding(field.name, BindingKind.NESTED, field.name)
    if field.kind is FieldKind.PROPERTY:
        kind = BindingKind.STATIC_PROPERTY if field.is_static else BindingKind.INSTANCE_PROPERTY
        return ConformanceBinding(field.name, kind, _member(field))
    kind = BindingKind.STATIC_METHOD if field.is_static else BindingKind.INSTANCE_METHOD
    return ConformanceBinding(field.name, kind, _member(field), _parameter_names(field))


def conformance_init(spec: WitnessSpec) -> Optional[ConformanceInit]:
    """The conformance constructor, or None unless ``conformanceInit`` is requested."""
    if not spec.has_option(GenerationOption.CONFORMANCE_INIT):
        return None
    return ConformanceInit(
        name=CONFORMANCE_INIT_NAME,
        bindings=tuple(_binding(f) for f in spec.fields),
    )
