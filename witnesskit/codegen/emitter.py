# witnesskit/codegen/emitter.py
"""
Witness emitter.

Turns an InterfaceSchema into a WitnessSpec: the witness record's name,
generic parameters, fields (one plain function per requirement, plus nested
witnesses for witnessed associated types) and constructor.

    protocol Combinable { func combine(_ other: Self) -> Self }

becomes

    CombinableWitness<A> { combine: (A, A) -> A }

Emission is all-or-nothing: any failing requirement aborts the schema.
"""

from __future__ import annotations

import keyword
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple, Union

from witnesskit.codegen.variance import (
    TransformKind,
    Variance,
    interface_transform_kind,
    polarities,
    promote,
    subject_names_for,
    variance,
)
from witnesskit.core.config import DEFAULT_SETTINGS, GeneratorSettings
from witnesskit.core.exceptions import SchemaError, UnsupportedRequirementError, WitnessError
from witnesskit.core.schema import (
    AccessLevel,
    AssociatedType,
    GenerationOption,
    InterfaceSchema,
    MethodRequirement,
    PropertyRequirement,
    Requirement,
    check_type_expressions,
)
from witnesskit.core.types import (
    SELF_NAME,
    VOID,
    FunctionType,
    GenericType,
    TypeExpr,
    TypeIdentifier,
    mentions,
    substitute,
)
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)


class FieldKind(str, Enum):
    """Where a witness field came from."""

    METHOD = "method"
    PROPERTY = "property"
    NESTED = "nested"


@dataclass(frozen=True)
class WitnessField:
    """One stored member of a witness."""

    name: str
    type: Union[FunctionType, GenericType]
    kind: FieldKind
    variance: Variance = Variance.INVARIANT
    is_static: bool = False
    is_mutating: bool = False
    requirement: Optional[Requirement] = field(default=None, compare=False)
    associated_type: Optional[str] = None

    @property
    def is_function(self) -> bool:
        return isinstance(self.type, FunctionType)

    @property
    def takes_receiver(self) -> bool:
        """Whether the first parameter is the subject value itself."""
        return self.kind is not FieldKind.NESTED and not self.is_static


@dataclass(frozen=True)
class WitnessSpec:
    """The generated witness, derived once per schema."""

    interface: str
    struct_name: str
    subject: str
    generic_parameters: Tuple[str, ...]
    fields: Tuple[WitnessField, ...]
    transform_kind: TransformKind
    access_level: AccessLevel
    options: FrozenSet[GenerationOption] = frozenset()
    transform_label: str = "B"

    @property
    def constructor_parameters(self) -> Tuple[Tuple[str, TypeExpr], ...]:
        """Required keyword arguments of the constructor, in field order."""
        return tuple((f.name, f.type) for f in self.fields)

    @property
    def associated_parameters(self) -> Tuple[str, ...]:
        return self.generic_parameters[1:]

    def field_named(self, name: str) -> Optional[WitnessField]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def has_option(self, option: GenerationOption) -> bool:
        return option in self.options


# =============================================================================
# Naming
# =============================================================================


def witness_struct_name(interface_name: str, settings: GeneratorSettings = DEFAULT_SETTINGS) -> str:
    """MyProtocol -> MyProtocolWitness"""
    return f"{interface_name}{settings.witness_suffix}"


def field_name(name: str) -> str:
    """Python-safe field name for a requirement: from -> from_"""
    if keyword.iskeyword(name):
        return f"{name}_"
    return name


def lower_camel(name: str) -> str:
    """Format -> format, URLSession -> urlSession"""
    if not name:
        return name
    upper = 0
    while upper < len(name) and name[upper].isupper():
        upper += 1
    if upper <= 1 or upper == len(name):
        return name[:upper].lower() + name[upper:]
    return name[: upper - 1].lower() + name[upper - 1 :]


# =============================================================================
# Field Construction
# =============================================================================


def _method_field(
    requirement: MethodRequirement,
    subject: TypeIdentifier,
    subject_names,
) -> WitnessField:
    mapping = {SELF_NAME: subject}
    params = tuple(substitute(p.type, mapping) for p in requirement.parameters)
    if not requirement.is_static:
        # Receiver, including mutating ones, becomes an explicit parameter.
        params = (subject,) + params

    result = VOID
    if requirement.return_type is not None:
        result = substitute(requirement.return_type, mapping)

    return WitnessField(
        name=field_name(requirement.name),
        type=FunctionType(params, result),
        kind=FieldKind.METHOD,
        variance=variance(requirement, subject_names),
        is_static=requirement.is_static,
        is_mutating=requirement.is_mutating,
        requirement=requirement,
    )


def _property_field(
    requirement: PropertyRequirement,
    subject: TypeIdentifier,
    subject_names,
) -> WitnessField:
    value_type = substitute(requirement.type, {SELF_NAME: subject})
    params = () if requirement.is_static else (subject,)
    return WitnessField(
        name=field_name(requirement.name),
        type=FunctionType(params, value_type),
        kind=FieldKind.PROPERTY,
        variance=variance(requirement, subject_names),
        is_static=requirement.is_static,
        requirement=requirement,
    )


def _nested_field(associated: AssociatedType, settings: GeneratorSettings) -> WitnessField:
    constraint = associated.constraint
    return WitnessField(
        name=field_name(lower_camel(associated.name)),
        type=GenericType(
            witness_struct_name(constraint.name, settings),
            (TypeIdentifier(associated.name),),
        ),
        kind=FieldKind.NESTED,
        associated_type=associated.name,
    )


def _used_associated_types(schema: InterfaceSchema) -> Tuple[AssociatedType, ...]:
    """Associated types some requirement actually mentions, in declaration order."""
    used = []
    for associated in schema.associated_types:
        for requirement in schema.requirements:
            if any(mentions(t, {associated.name}) for t in requirement.type_expressions()):
                used.append(associated)
                break
    return tuple(used)


def field_directions(fields, subject: str) -> Tuple[bool, bool]:
    """
    Which conversions the fields need, as ``(needs_to, needs_from)``.

    ``to`` turns a B into an A for argument positions, ``from`` turns an A
    into a B for results. Nested witnesses are forwarded untouched.
    """
    found = set()
    for f in fields:
        if f.is_function:
            found |= polarities(f.type, {subject}, output=True)
    return False in found, True in found


def _requirement_field(requirement, subject, subject_names) -> WitnessField:
    if isinstance(requirement, MethodRequirement):
        return _method_field(requirement, subject, subject_names)
    if isinstance(requirement, PropertyRequirement):
        return _property_field(requirement, subject, subject_names)
    raise UnsupportedRequirementError(
        f"no emit rule for requirement of type {type(requirement).__name__}",
        requirement=getattr(requirement, "name", None) or repr(requirement),
    )


# Members every generated witness class defines besides its fields.
RESERVED_MEMBERS = frozenset({"field_names", "replace", "register"})


def _check_reserved(interface: str, fields, kind: TransformKind, options) -> None:
    reserved = set(RESERVED_MEMBERS)
    if kind is not TransformKind.NONE:
        reserved.add(kind.value)
    if GenerationOption.CONFORMANCE_INIT in options:
        reserved.add("from_conformance")
    for f in fields:
        if f.name in reserved or f.name.startswith("__"):
            raise SchemaError(
                f"field {f.name!r} clashes with a generated witness member",
                interface=interface,
                requirement=f.name,
            )


# =============================================================================
# Emit
# =============================================================================


def emit(schema: InterfaceSchema, settings: Optional[GeneratorSettings] = None) -> WitnessSpec:
    """
    Build the WitnessSpec for a schema.

    Raises:
        SchemaError: Unwalkable types, name clashes
        UnsupportedRequirementError: Requirement shape without a rule
    """
    settings = settings or DEFAULT_SETTINGS
    subject = TypeIdentifier(settings.subject_label)

    for requirement in schema.requirements:
        if not isinstance(requirement, (MethodRequirement, PropertyRequirement)):
            raise UnsupportedRequirementError(
                f"no emit rule for requirement of type {type(requirement).__name__}",
                interface=schema.name,
                requirement=getattr(requirement, "name", None) or repr(requirement),
            )
    check_type_expressions(schema)

    for associated in schema.associated_types:
        if associated.name in (settings.subject_label, settings.transform_label):
            raise SchemaError(
                f"associated type {associated.name!r} clashes with a witness generic parameter",
                interface=schema.name,
            )

    subject_names = subject_names_for(schema)
    associated = _used_associated_types(schema)

    fields = [
        _nested_field(a, settings) for a in associated if a.is_witnessed
    ]
    for requirement in schema.requirements:
        try:
            fields.append(_requirement_field(requirement, subject, subject_names))
        except WitnessError as e:
            raise e.with_context(interface=schema.name, requirement=requirement.name) from e

    seen = set()
    for f in fields:
        if not f.name.isidentifier():
            raise SchemaError(f"{f.name!r} is not a valid field name", interface=schema.name, requirement=f.name)
        if f.name in seen:
            raise SchemaError(f"duplicate witness field {f.name!r}", interface=schema.name, requirement=f.name)
        seen.add(f.name)

    base_kind = interface_transform_kind(schema)
    kind = promote(base_kind, *field_directions(fields, settings.subject_label))
    if kind is not base_kind:
        logger.debug(f"{tags.EMIT} {schema.name}: {base_kind.value} widened to {kind.value}")

    options = schema.options | GenerationOption.parse(settings.default_options)
    _check_reserved(schema.name, fields, kind, options)

    spec = WitnessSpec(
        interface=schema.name,
        struct_name=witness_struct_name(schema.name, settings),
        subject=settings.subject_label,
        generic_parameters=(settings.subject_label,) + tuple(a.name for a in associated),
        fields=tuple(fields),
        transform_kind=kind,
        access_level=AccessLevel.resolve([schema.access_level]),
        options=options,
        transform_label=settings.transform_label,
    )

    logger.debug(
        f"{tags.EMIT} {spec.struct_name}<{', '.join(spec.generic_parameters)}> "
        f"with {len(spec.fields)} field(s), transform={spec.transform_kind.value}"
    )
    return spec
