# witnesskit/core/schema.py
"""
In-memory model of an interface schema.

A schema is what the generator consumes: the interface's name, access level,
ordered requirements, associated types and generation options. Schemas are
built in code or by witnesskit.schema.loader from YAML documents.

Example:
    >>> comparable = InterfaceSchema(
    ...     name="Comparable",
    ...     requirements=(
    ...         MethodRequirement(
    ...             name="compare",
    ...             parameters=(Parameter(type=SELF, name="other"),),
    ...             return_type=TypeIdentifier("Bool"),
    ...         ),
    ...     ),
    ... )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional, Tuple, Union

from witnesskit.core.exceptions import SchemaError
from witnesskit.core.types import TypeExpr, is_type_expr
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)


# =============================================================================
# Enums
# =============================================================================


class AccessLevel(str, Enum):
    """Visibility of an interface and of the witness generated for it."""

    DEFAULT = "default"
    INTERNAL = "internal"
    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def rank(self) -> int:
        """Lower is less visible."""
        return {
            AccessLevel.PRIVATE: 0,
            AccessLevel.INTERNAL: 1,
            AccessLevel.DEFAULT: 1,
            AccessLevel.PUBLIC: 2,
        }[self]

    @classmethod
    def resolve(cls, levels: Iterable["AccessLevel"]) -> "AccessLevel":
        """
        Pick the least-visible explicit level.

        Unmarked declarations are module-internal, so an empty input (or one
        holding only DEFAULT) resolves to INTERNAL.
        """
        explicit = [level for level in levels if level is not cls.DEFAULT]
        if not explicit:
            return cls.INTERNAL
        return min(explicit, key=lambda level: level.rank)


class GenerationOption(str, Enum):
    """Extra code the generator derives on request."""

    UTILITIES = "utilities"
    CONFORMANCE_INIT = "conformanceInit"

    @classmethod
    def parse(cls, tokens: Iterable[str]) -> FrozenSet["GenerationOption"]:
        """Parse option tokens, ignoring unrecognized ones."""
        by_value = {option.value: option for option in cls}
        parsed = set()
        for token in tokens:
            normalized = str(token).strip().lstrip(".")
            option = by_value.get(normalized)
            if option is None:
                logger.debug(f"Ignoring unknown generation option {token!r}")
                continue
            parsed.add(option)
        return frozenset(parsed)


# =============================================================================
# Requirements
# =============================================================================


@dataclass(frozen=True)
class Parameter:
    """
    One method parameter.

    ``label`` is the external argument label (``"_"`` for none) and ``name``
    the internal one; only ``type`` matters to generation.
    """

    type: TypeExpr
    label: str = "_"
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        return self.label if self.label != "_" else "value"


@dataclass(frozen=True)
class MethodRequirement:
    """A function requirement of an interface."""

    name: str
    parameters: Tuple[Parameter, ...] = ()
    return_type: Optional[TypeExpr] = None
    is_static: bool = False
    is_mutating: bool = False
    generic_parameters: Tuple[str, ...] = ()

    def type_expressions(self) -> Tuple[TypeExpr, ...]:
        types = tuple(p.type for p in self.parameters)
        if self.return_type is not None:
            types += (self.return_type,)
        return types


@dataclass(frozen=True)
class PropertyRequirement:
    """A read-only property requirement of an interface."""

    name: str
    type: TypeExpr
    is_static: bool = False

    def type_expressions(self) -> Tuple[TypeExpr, ...]:
        return (self.type,)


Requirement = Union[MethodRequirement, PropertyRequirement]


@dataclass(frozen=True)
class AssociatedType:
    """
    A type placeholder declared by the interface.

    ``constraint`` links to another schema when that interface is itself
    witnessed; the witness then embeds a nested witness for it.
    ``constraint_name`` records the constraint's name either way.
    """

    name: str
    constraint: Optional["InterfaceSchema"] = None
    constraint_name: Optional[str] = None

    @property
    def is_witnessed(self) -> bool:
        return self.constraint is not None


# =============================================================================
# Interface
# =============================================================================


@dataclass(frozen=True)
class InterfaceSchema:
    """A named set of requirements to turn into a witness."""

    name: str
    requirements: Tuple[Requirement, ...] = ()
    associated_types: Tuple[AssociatedType, ...] = ()
    access_level: AccessLevel = AccessLevel.DEFAULT
    options: FrozenSet[GenerationOption] = field(default_factory=frozenset)

    def __post_init__(self):
        if not self.name or not self.name.isidentifier():
            raise SchemaError(f"interface name must be a non-empty identifier, got {self.name!r}")

        # Allow lists to be passed for convenience; store tuples.
        object.__setattr__(self, "requirements", tuple(self.requirements))
        object.__setattr__(self, "associated_types", tuple(self.associated_types))
        object.__setattr__(self, "options", frozenset(self.options))
        try:
            object.__setattr__(self, "access_level", AccessLevel(self.access_level))
        except ValueError:
            raise SchemaError(
                f"unknown access level {self.access_level!r}", interface=self.name
            ) from None

    def has_option(self, option: GenerationOption) -> bool:
        return option in self.options

    @property
    def associated_type_names(self) -> Tuple[str, ...]:
        return tuple(a.name for a in self.associated_types)

    def requirement_named(self, name: str) -> Optional[Requirement]:
        for requirement in self.requirements:
            if getattr(requirement, "name", None) == name:
                return requirement
        return None


def check_type_expressions(schema: InterfaceSchema) -> None:
    """Raise SchemaError when a requirement carries a non-structured type."""
    for requirement in schema.requirements:
        exprs = getattr(requirement, "type_expressions", None)
        if exprs is None:
            continue
        for expr in exprs():
            if not is_type_expr(expr):
                raise SchemaError(
                    f"type {expr!r} is not a structured type expression",
                    interface=schema.name,
                    requirement=getattr(requirement, "name", None),
                )


def check_unique_names(schemas: Iterable[InterfaceSchema]) -> None:
    """Interface names must be unique within a generation unit."""
    seen = set()
    for schema in schemas:
        if schema.name in seen:
            raise SchemaError("duplicate interface name in generation unit", interface=schema.name)
        seen.add(schema.name)
