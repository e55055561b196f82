# witnesskit/core/types.py
"""
Structured type expressions.

Requirement signatures are never raw strings: every parameter, return and
property type is one of a closed set of variants the analyzer can walk.

Variants:
    TypeIdentifier   Bool, Self, Format
    GenericType      Array<Self>, Dictionary<String, Self>
    FunctionType     (Self, Int) -> Bool
    TupleType        (String, [String]); the empty tuple is Void
    OptionalType     Self?

Examples:
    >>> t = FunctionType((SELF, SELF), TypeIdentifier("Bool"))
    >>> str(substitute(t, {"Self": TypeIdentifier("A")}))
    '(A, A) -> Bool'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Mapping, Tuple, Union

from witnesskit.core.exceptions import SchemaError

# Name used in schemas for the interface's own type.
SELF_NAME = "Self"


@dataclass(frozen=True)
class TypeIdentifier:
    """A bare named type."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class GenericType:
    """A named type applied to generic arguments."""

    name: str
    arguments: Tuple["TypeExpr", ...] = ()

    def __str__(self) -> str:
        if self.name == "Array" and len(self.arguments) == 1:
            return f"[{self.arguments[0]}]"
        if self.name == "Dictionary" and len(self.arguments) == 2:
            return f"[{self.arguments[0]}: {self.arguments[1]}]"
        args = ", ".join(str(a) for a in self.arguments)
        return f"{self.name}<{args}>"


@dataclass(frozen=True)
class FunctionType:
    """A function from parameter types to a result type."""

    parameters: Tuple["TypeExpr", ...]
    result: "TypeExpr"

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        return f"({params}) -> {self.result}"


@dataclass(frozen=True)
class TupleType:
    """A tuple of element types."""

    elements: Tuple["TypeExpr", ...] = ()

    @property
    def is_void(self) -> bool:
        return not self.elements

    def __str__(self) -> str:
        if self.is_void:
            return "Void"
        return "(" + ", ".join(str(e) for e in self.elements) + ")"


@dataclass(frozen=True)
class OptionalType:
    """A value that may be absent."""

    wrapped: "TypeExpr"

    def __str__(self) -> str:
        inner = str(self.wrapped)
        if isinstance(self.wrapped, FunctionType):
            inner = f"({inner})"
        return f"{inner}?"


TypeExpr = Union[TypeIdentifier, GenericType, FunctionType, TupleType, OptionalType]

TYPE_EXPR_CLASSES = (TypeIdentifier, GenericType, FunctionType, TupleType, OptionalType)

SELF = TypeIdentifier(SELF_NAME)
VOID = TupleType(())


# =============================================================================
# Walking
# =============================================================================


def children(node: TypeExpr) -> Tuple[TypeExpr, ...]:
    """Direct sub-expressions of a type expression."""
    if isinstance(node, TypeIdentifier):
        return ()
    if isinstance(node, GenericType):
        return node.arguments
    if isinstance(node, FunctionType):
        return node.parameters + (node.result,)
    if isinstance(node, TupleType):
        return node.elements
    if isinstance(node, OptionalType):
        return (node.wrapped,)
    raise SchemaError(f"cannot walk type expression {node!r} ({type(node).__name__})")


def walk_type(node: TypeExpr) -> Iterator[TypeExpr]:
    """Yield the node and every nested node, depth first."""
    stack = [node]
    while stack:
        current = stack.pop()
        kids = children(current)
        yield current
        stack.extend(reversed(kids))


def identifiers(node: TypeExpr) -> Iterator[str]:
    """Yield every referenced type name, including generic heads."""
    for current in walk_type(node):
        if isinstance(current, (TypeIdentifier, GenericType)):
            yield current.name


def mentions(node: TypeExpr, names) -> bool:
    """Whether any of ``names`` is referenced anywhere inside ``node``."""
    wanted = set(names)
    return any(name in wanted for name in identifiers(node))


def transform_type(node: TypeExpr, fn: Callable[[TypeExpr], TypeExpr]) -> TypeExpr:
    """Rebuild ``node`` bottom-up, applying ``fn`` to every rebuilt node."""
    if isinstance(node, TypeIdentifier):
        return fn(node)
    if isinstance(node, GenericType):
        args = tuple(transform_type(a, fn) for a in node.arguments)
        return fn(GenericType(node.name, args))
    if isinstance(node, FunctionType):
        params = tuple(transform_type(p, fn) for p in node.parameters)
        return fn(FunctionType(params, transform_type(node.result, fn)))
    if isinstance(node, TupleType):
        return fn(TupleType(tuple(transform_type(e, fn) for e in node.elements)))
    if isinstance(node, OptionalType):
        return fn(OptionalType(transform_type(node.wrapped, fn)))
    raise SchemaError(f"cannot walk type expression {node!r} ({type(node).__name__})")


def substitute(node: TypeExpr, mapping: Mapping[str, TypeExpr]) -> TypeExpr:
    """Replace identifiers named in ``mapping``."""

    def replace(current: TypeExpr) -> TypeExpr:
        if isinstance(current, TypeIdentifier) and current.name in mapping:
            return mapping[current.name]
        return current

    return transform_type(node, replace)


def is_type_expr(value: object) -> bool:
    return isinstance(value, TYPE_EXPR_CLASSES)
