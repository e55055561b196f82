# witnesskit/runtime/lifting.py
"""
Converter combinators.

Used both by in-process witnesses (build_witness_class) and by the Python
modules witnesskit renders, so the two stay behaviorally identical.

    lift_optional(f)(None)            -> None
    lift_sequence(list, f)([a, b])    -> [f(a), f(b)]
    lift_function((f,), g)(h)(x)      -> g(h(f(x)))
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence

from witnesskit.codegen.transforms import (
    Conversion,
    ConversionKind,
    Direction,
    FieldRewrite,
)

Converter = Callable[[Any], Any]

CONTAINERS = {"list": list, "set": set, "frozenset": frozenset}


def identity(value: Any) -> Any:
    return value


def lift_optional(f: Converter) -> Converter:
    def convert(value):
        return None if value is None else f(value)

    return convert


def lift_tuple(*fs: Converter) -> Converter:
    def convert(value):
        return tuple(f(item) for f, item in zip(fs, value))

    return convert


def lift_sequence(container: Callable, f: Converter) -> Converter:
    def convert(value):
        return container(f(item) for item in value)

    return convert


def lift_mapping(key: Converter, value: Converter) -> Converter:
    def convert(mapping):
        return {key(k): value(v) for k, v in mapping.items()}

    return convert


def lift_function(parameters: Sequence[Converter], result: Converter) -> Converter:
    """Wrap a function so its arguments and result are converted."""
    parameters = tuple(parameters)

    def convert(function):
        def converted(*args):
            return result(function(*(p(a) for p, a in zip(parameters, args))))

        return converted

    return convert


def converter_for(conversion: Conversion, functions: Mapping[Direction, Converter]) -> Converter:
    """
    Build the callable for a planned conversion.

    ``functions`` maps each direction to the conversion function the caller
    passed to map/pullback/iso.
    """
    kind = conversion.kind
    if kind is ConversionKind.IDENTITY:
        return identity
    if kind is ConversionKind.APPLY:
        return functions[conversion.direction]

    children = [converter_for(c, functions) for c in conversion.children]
    if kind is ConversionKind.OPTIONAL:
        return lift_optional(children[0])
    if kind is ConversionKind.TUPLE:
        return lift_tuple(*children)
    if kind is ConversionKind.SEQUENCE:
        return lift_sequence(CONTAINERS[conversion.container], children[0])
    if kind is ConversionKind.MAPPING:
        return lift_mapping(children[0], children[1])
    if kind is ConversionKind.FUNCTION:
        return lift_function(children[:-1], children[-1])
    raise ValueError(f"Unknown conversion kind: {kind!r}")


def rewrite_value(original: Any, rewrite: FieldRewrite, functions: Mapping[Direction, Converter]) -> Any:
    """
    Rebuild one witness field.

    Fields that need no conversion are forwarded by reference.
    """
    if rewrite.is_passthrough:
        return original

    arguments = [converter_for(c, functions) for c in rewrite.arguments]
    result = converter_for(rewrite.result, functions)

    def rewritten(*args):
        if len(args) != len(arguments):
            raise TypeError(
                f"{rewrite.field}() takes {len(arguments)} argument(s) but {len(args)} were given"
            )
        return result(original(*(f(a) for f, a in zip(arguments, args))))

    rewritten.__name__ = getattr(original, "__name__", rewrite.field)
    return rewritten
