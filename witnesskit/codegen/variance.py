# witnesskit/codegen/variance.py
"""
Variance analysis of interface requirements.

Decides how a requirement uses the subject type: only as input
(contravariant), only as output (covariant), or both (invariant). Subject
names are the interface's own type (``Self``) plus its associated types and
any generic parameters the requirement introduces itself.

The witness-level aggregate picks which transformer a witness gets:

    {COVARIANT}                      -> MAP
    {CONTRAVARIANT}                  -> PULLBACK
    both, or anything with INVARIANT -> ISO
    {} (subject never used)          -> NONE
"""

from __future__ import annotations

from enum import Enum
from typing import AbstractSet, FrozenSet, Iterable, Set

from witnesskit.core.exceptions import SchemaError, UnsupportedRequirementError
from witnesskit.core.schema import InterfaceSchema, MethodRequirement, PropertyRequirement
from witnesskit.core.types import (
    SELF_NAME,
    FunctionType,
    TypeExpr,
    children,
    identifiers,
    is_type_expr,
)
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)


class Variance(str, Enum):
    """How a requirement's subject-type occurrences are distributed."""

    CONTRAVARIANT = "contravariant"
    COVARIANT = "covariant"
    INVARIANT = "invariant"


class TransformKind(str, Enum):
    """Which whole-witness transformer a witness gets."""

    MAP = "map"
    PULLBACK = "pullback"
    ISO = "iso"
    NONE = "none"


# =============================================================================
# Type Classification
# =============================================================================


def classify(type_expr: TypeExpr, subject_names: AbstractSet[str]) -> Set[str]:
    """Return every subject name occurring anywhere inside ``type_expr``."""
    if not is_type_expr(type_expr):
        raise SchemaError(f"cannot walk type expression {type_expr!r}")
    return {name for name in identifiers(type_expr) if name in subject_names}


def subject_names_for(schema: InterfaceSchema) -> FrozenSet[str]:
    """The interface's own type plus its associated types."""
    return frozenset({SELF_NAME, *schema.associated_type_names})


def _requirement_subjects(requirement, subject_names: AbstractSet[str]) -> FrozenSet[str]:
    if isinstance(requirement, MethodRequirement) and requirement.generic_parameters:
        return frozenset(subject_names) | frozenset(requirement.generic_parameters)
    return frozenset(subject_names)


def _positions(requirement, subject_names: AbstractSet[str]):
    """Subject names found in input and in output position."""
    names = _requirement_subjects(requirement, subject_names)

    if isinstance(requirement, MethodRequirement):
        inputs: Set[str] = set()
        for parameter in requirement.parameters:
            inputs |= classify(parameter.type, names)
        outputs: Set[str] = set()
        if requirement.return_type is not None:
            outputs = classify(requirement.return_type, names)
        return inputs, outputs

    if isinstance(requirement, PropertyRequirement):
        # Properties only have a read position.
        return set(), classify(requirement.type, names)

    raise UnsupportedRequirementError(
        f"no variance rule for requirement of type {type(requirement).__name__}",
        requirement=getattr(requirement, "name", None),
    )


def variance(requirement, subject_names: AbstractSet[str]) -> Variance:
    """
    Classify a requirement.

    The implicit receiver of an instance requirement is not a parameter and
    does not count as an input position.
    """
    inputs, outputs = _positions(requirement, subject_names)

    if inputs & outputs:
        return Variance.INVARIANT
    if inputs and not outputs:
        return Variance.CONTRAVARIANT
    if outputs and not inputs:
        return Variance.COVARIANT
    # Subject absent, or disjoint names on both sides.
    return Variance.INVARIANT


def occurs(requirement, subject_names: AbstractSet[str]) -> bool:
    """Whether any subject name appears in the requirement's signature."""
    inputs, outputs = _positions(requirement, subject_names)
    return bool(inputs or outputs)


def variance_of(parameter_type: TypeExpr, subject_names: AbstractSet[str]) -> Variance:
    """
    Classify a single parameter position.

    CONTRAVARIANT when the position mentions a subject name, else INVARIANT.
    """
    if classify(parameter_type, subject_names):
        return Variance.CONTRAVARIANT
    return Variance.INVARIANT


# =============================================================================
# Witness-level Aggregate
# =============================================================================


def transform_kind(variances: Iterable[Variance]) -> TransformKind:
    """Pick the transformer for a set of requirement variances."""
    observed = set(variances)
    if not observed:
        return TransformKind.NONE
    if Variance.INVARIANT in observed:
        return TransformKind.ISO
    if Variance.COVARIANT in observed and Variance.CONTRAVARIANT in observed:
        return TransformKind.ISO
    if Variance.CONTRAVARIANT in observed:
        return TransformKind.PULLBACK
    return TransformKind.MAP


def interface_variances(schema: InterfaceSchema) -> Set[Variance]:
    """
    Variances of every requirement that uses a subject type.

    Requirements that never mention a subject contribute nothing, so an
    interface built only from them gets no transformer.
    """
    names = subject_names_for(schema)
    observed = set()
    for requirement in schema.requirements:
        try:
            if occurs(requirement, names):
                observed.add(variance(requirement, names))
        except SchemaError as e:
            raise e.with_context(interface=schema.name, requirement=requirement.name) from e
        except UnsupportedRequirementError as e:
            raise e.with_context(interface=schema.name) from e
    return observed


def interface_transform_kind(schema: InterfaceSchema) -> TransformKind:
    observed = interface_variances(schema)
    kind = transform_kind(observed)
    logger.debug(
        f"{tags.VARIANCE} {schema.name}: "
        f"{sorted(v.value for v in observed) or 'subject unused'} -> {kind.value}"
    )
    return kind


# =============================================================================
# Conversion Directions
# =============================================================================


def polarities(type_expr: TypeExpr, subject_names: AbstractSet[str], output: bool) -> Set[bool]:
    """
    Positions in which a subject occurs, as ``output`` flags.

    Function parameters flip the position: a callback's argument is produced
    by whoever calls the callback.
    """
    if not is_type_expr(type_expr):
        raise SchemaError(f"cannot walk type expression {type_expr!r}")

    if isinstance(type_expr, FunctionType):
        found: Set[bool] = set()
        for parameter in type_expr.parameters:
            found |= polarities(parameter, subject_names, not output)
        return found | polarities(type_expr.result, subject_names, output)

    found = set()
    if getattr(type_expr, "name", None) in subject_names:
        found.add(output)
    for child in children(type_expr):
        found |= polarities(child, subject_names, output)
    return found


def promote(kind: TransformKind, needs_to: bool, needs_from: bool) -> TransformKind:
    """
    Widen a transformer that lacks a direction some field needs.

    MAP only carries ``(A) -> B`` and PULLBACK only ``(B) -> A``; ISO carries
    both.

    A contravariant-only interface whose parameter is a callback taking the
    subject, ``each(f: (Self) -> Void)``, is widened too: the callback is
    rebuilt with ``(A) -> B``, so it gets ISO rather than PULLBACK.
    """
    if kind is TransformKind.MAP and needs_to:
        return TransformKind.ISO
    if kind is TransformKind.PULLBACK and needs_from:
        return TransformKind.ISO
    return kind
