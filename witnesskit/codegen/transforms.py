# witnesskit/codegen/transforms.py
"""
Transformer emitter.

Builds the whole-witness transformer that turns a ``Witness[A]`` into a
``Witness[B]``:

    map(transform: (A) -> B)                 covariant witnesses
    pullback(transform: (B) -> A)            contravariant witnesses
    iso(to: (B) -> A, from_: (A) -> B)       mixed or invariant witnesses

Which transformer exists is decided by the witness-level aggregate (see
WitnessSpec.transform_kind). How each field is rewritten is decided per
field: an argument position is converted with ``to`` only when it mentions
the subject, a result only when it mentions the subject, using ``from``.
Conversions are structural so ``[A]``, ``A?`` and ``(A, Int)`` are lifted
elementwise instead of being passed to the conversion function whole.

Example (Comparable):
    compare: (A, A) -> Bool
    pullback  -> compare=lambda b0, b1: self.compare(transform(b0), transform(b1))
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple

from witnesskit.codegen.emitter import FieldKind, WitnessField, WitnessSpec
from witnesskit.codegen.variance import TransformKind, Variance, variance_of
from witnesskit.core.exceptions import UnsupportedRequirementError, WitnessError
from witnesskit.core.schema import InterfaceSchema
from witnesskit.core.types import (
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeExpr,
    TypeIdentifier,
    mentions,
)
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)

# Generic heads that behave like homogeneous collections, and the Python
# container their converted elements are rebuilt into.
SEQUENCE_CONTAINERS = {
    "Array": "list",
    "List": "list",
    "list": "list",
    "Sequence": "list",
    "Set": "set",
    "set": "set",
    "FrozenSet": "frozenset",
    "frozenset": "frozenset",
}

MAPPING_CONTAINERS = {"Dictionary", "Dict", "dict", "Mapping"}


class Direction(str, Enum):
    """Which way a conversion goes."""

    TO = "to"  # B -> A, applied to arguments
    FROM = "from"  # A -> B, applied to results

    def flipped(self) -> "Direction":
        return Direction.FROM if self is Direction.TO else Direction.TO


class ConversionKind(str, Enum):
    IDENTITY = "identity"
    APPLY = "apply"
    OPTIONAL = "optional"
    TUPLE = "tuple"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    FUNCTION = "function"


@dataclass(frozen=True)
class Conversion:
    """
    How one value position is rewritten.

    For FUNCTION, ``children`` holds the parameter conversions followed by
    the result conversion.
    """

    kind: ConversionKind
    direction: Optional[Direction] = None
    children: Tuple["Conversion", ...] = ()
    container: Optional[str] = None

    @property
    def is_identity(self) -> bool:
        return self.kind is ConversionKind.IDENTITY

    def directions(self) -> Iterator[Direction]:
        """Every direction applied anywhere inside this conversion."""
        if self.direction is not None:
            yield self.direction
        for child in self.children:
            yield from child.directions()


IDENTITY = Conversion(ConversionKind.IDENTITY)


@dataclass(frozen=True)
class FieldRewrite:
    """How one field of the transformed witness is built."""

    field: str
    arguments: Tuple[Conversion, ...] = ()
    result: Conversion = IDENTITY
    nested: bool = False

    @property
    def is_passthrough(self) -> bool:
        """Forward the original value unchanged."""
        return self.nested or (
            self.result.is_identity and all(a.is_identity for a in self.arguments)
        )

    def directions(self) -> set:
        found = set(self.result.directions())
        for argument in self.arguments:
            found |= set(argument.directions())
        return found


@dataclass(frozen=True)
class TransformParameter:
    """A conversion function accepted by a transformer."""

    name: str
    direction: Direction
    type: FunctionType


@dataclass(frozen=True)
class TransformDef:
    """One generated transformer method."""

    kind: TransformKind
    name: str
    parameters: Tuple[TransformParameter, ...]
    result_type: GenericType
    rewrites: Tuple[FieldRewrite, ...]

    def parameter_for(self, direction: Direction) -> Optional[TransformParameter]:
        for parameter in self.parameters:
            if parameter.direction is direction:
                return parameter
        return None


# =============================================================================
# Conversion Planning
# =============================================================================


def plan_conversion(type_expr: TypeExpr, subject: str, direction: Direction) -> Conversion:
    """
    Build the conversion for a value of ``type_expr`` flowing in ``direction``.

    Raises:
        UnsupportedRequirementError: The subject sits inside a generic type
            whose values cannot be rebuilt elementwise.
    """
    if not mentions(type_expr, {subject}):
        return IDENTITY

    if isinstance(type_expr, TypeIdentifier):
        return Conversion(ConversionKind.APPLY, direction=direction)

    if isinstance(type_expr, OptionalType):
        inner = plan_conversion(type_expr.wrapped, subject, direction)
        return Conversion(ConversionKind.OPTIONAL, children=(inner,))

    if isinstance(type_expr, TupleType):
        elements = tuple(plan_conversion(e, subject, direction) for e in type_expr.elements)
        return Conversion(ConversionKind.TUPLE, children=elements)

    if isinstance(type_expr, FunctionType):
        params = tuple(
            plan_conversion(p, subject, direction.flipped()) for p in type_expr.parameters
        )
        result = plan_conversion(type_expr.result, subject, direction)
        return Conversion(ConversionKind.FUNCTION, children=params + (result,))

    if isinstance(type_expr, GenericType):
        args = type_expr.arguments
        if type_expr.name == "Optional" and len(args) == 1:
            inner = plan_conversion(args[0], subject, direction)
            return Conversion(ConversionKind.OPTIONAL, children=(inner,))
        if type_expr.name in SEQUENCE_CONTAINERS and len(args) == 1:
            inner = plan_conversion(args[0], subject, direction)
            return Conversion(
                ConversionKind.SEQUENCE,
                children=(inner,),
                container=SEQUENCE_CONTAINERS[type_expr.name],
            )
        if type_expr.name in MAPPING_CONTAINERS and len(args) == 2:
            key = plan_conversion(args[0], subject, direction)
            value = plan_conversion(args[1], subject, direction)
            return Conversion(ConversionKind.MAPPING, children=(key, value))

    raise UnsupportedRequirementError(f"cannot convert values of type {type_expr} between witnesses")


def plan_field(field: WitnessField, subject: str) -> FieldRewrite:
    """Plan the rewrite of a single witness field."""
    if field.kind is FieldKind.NESTED:
        return FieldRewrite(field=field.name, nested=True)

    function = field.type
    arguments = []
    for parameter in function.parameters:
        if variance_of(parameter, {subject}) is Variance.CONTRAVARIANT:
            arguments.append(plan_conversion(parameter, subject, Direction.TO))
        else:
            arguments.append(IDENTITY)

    result = plan_conversion(function.result, subject, Direction.FROM)
    return FieldRewrite(field=field.name, arguments=tuple(arguments), result=result)


# =============================================================================
# Transformer Signatures
# =============================================================================


def _signature(kind: TransformKind, subject: str, target: str) -> Tuple[TransformParameter, ...]:
    a, b = TypeIdentifier(subject), TypeIdentifier(target)
    to_type = FunctionType((b,), a)
    from_type = FunctionType((a,), b)

    if kind is TransformKind.MAP:
        return (TransformParameter("transform", Direction.FROM, from_type),)
    if kind is TransformKind.PULLBACK:
        return (TransformParameter("transform", Direction.TO, to_type),)
    return (
        TransformParameter("to", Direction.TO, to_type),
        TransformParameter("from_", Direction.FROM, from_type),
    )


def emit_transforms(schema: InterfaceSchema, spec: WitnessSpec) -> Tuple[TransformDef, ...]:
    """
    Build the transformer for a witness, or nothing when the subject type is
    never used.

    Raises:
        UnsupportedRequirementError: A field cannot be converted with the
            available directions.
    """
    kind = spec.transform_kind
    if kind is TransformKind.NONE:
        logger.debug(f"{tags.TRANSFORM} {spec.struct_name}: subject unused, no transformer")
        return ()

    parameters = _signature(kind, spec.subject, spec.transform_label)
    available = {p.direction for p in parameters}

    rewrites = []
    for f in spec.fields:
        try:
            rewrite = plan_field(f, spec.subject)
        except WitnessError as e:
            raise e.with_context(interface=schema.name, requirement=f.name) from e

        missing = rewrite.directions() - available
        if missing:
            raise UnsupportedRequirementError(
                f"{kind.value} cannot convert this field "
                f"(needs {', '.join(sorted(d.value for d in missing))})",
                interface=schema.name,
                requirement=f.name,
            )
        rewrites.append(rewrite)

    transform = TransformDef(
        kind=kind,
        name=kind.value,
        parameters=parameters,
        result_type=GenericType(
            spec.struct_name,
            tuple(TypeIdentifier(p) for p in (spec.transform_label,) + spec.associated_parameters),
        ),
        rewrites=tuple(rewrites),
    )
    logger.debug(f"{tags.TRANSFORM} {spec.struct_name}.{transform.name} over {len(rewrites)} field(s)")
    return (transform,)
