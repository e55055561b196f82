# witnesskit/codegen/renderer.py
"""
Render witnesses as Python source.

Each witness becomes a frozen, generic dataclass with one Callable field per
requirement, its transformer, and any option-driven helpers:

    @dataclass(frozen=True)
    class ComparableWitness(Generic[A]):
        \"\"\"Witness for the Comparable interface.\"\"\"

        compare: Callable[[A, A], bool]

        def pullback(self, transform: Callable[[B], A]) -> ComparableWitness[B]:
            return ComparableWitness(
                compare=lambda b0, b1: self.compare(transform(b0), transform(b1)),
            )

Access levels map onto Python conventions: public witnesses are listed in
``__all__``, private ones get a leading underscore, internal ones neither.

Rendered modules import their converter combinators from
witnesskit.runtime.lifting, the same ones in-process witnesses use.
"""

from __future__ import annotations

import keyword
from typing import Dict, List, Optional, Sequence, Set, Tuple

from witnesskit.codegen.emitter import WitnessField, WitnessSpec
from witnesskit.codegen.transforms import Conversion, ConversionKind, Direction, TransformDef
from witnesskit.codegen.utilities import (
    BindingKind,
    ConformanceInit,
    FoldHelper,
    conformance_init,
    fold_helpers,
)
from witnesskit.core.config import DEFAULT_SETTINGS, GeneratorSettings
from witnesskit.core.schema import AccessLevel
from witnesskit.core.types import (
    FunctionType,
    GenericType,
    OptionalType,
    TupleType,
    TypeExpr,
    TypeIdentifier,
)
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)

HEADER = "# Generated by witnesskit. Do not edit."

INDENT = "    "

# Interface-level type names with a direct Python counterpart.
PYTHON_NAMES = {
    "Bool": "bool",
    "String": "str",
    "Character": "str",
    "Int": "int",
    "UInt": "int",
    "Double": "float",
    "Float": "float",
    "Data": "bytes",
    "Void": "None",
    "Any": "Any",
}

SEQUENCE_NAMES = {
    "Array": "list",
    "List": "list",
    "Sequence": "Sequence",
    "Set": "set",
    "FrozenSet": "frozenset",
}
MAPPING_NAMES = {"Dictionary": "dict", "Dict": "dict", "Mapping": "Mapping"}


class _Context:
    """Imports and names collected while rendering one module."""

    def __init__(self, class_names: Dict[str, str]):
        self.class_names = class_names
        self.typing: Set[str] = {"Callable", "Generic", "TypeVar"}
        self.lifting: Set[str] = set()
        self.functools = False
        self.missing_sentinel = False

    def class_name(self, struct_name: str) -> str:
        return self.class_names.get(struct_name, struct_name)


# =============================================================================
# Types
# =============================================================================


def render_type(type_expr: TypeExpr, ctx: Optional[_Context] = None) -> str:
    """Python annotation for a type expression."""
    ctx = ctx or _Context({})

    if isinstance(type_expr, TypeIdentifier):
        name = PYTHON_NAMES.get(type_expr.name, type_expr.name)
        if name == "Any":
            ctx.typing.add("Any")
        return name

    if isinstance(type_expr, OptionalType):
        ctx.typing.add("Optional")
        return f"Optional[{render_type(type_expr.wrapped, ctx)}]"

    if isinstance(type_expr, TupleType):
        if type_expr.is_void:
            return "None"
        return "tuple[" + ", ".join(render_type(e, ctx) for e in type_expr.elements) + "]"

    if isinstance(type_expr, FunctionType):
        params = ", ".join(render_type(p, ctx) for p in type_expr.parameters)
        return f"Callable[[{params}], {render_type(type_expr.result, ctx)}]"

    if isinstance(type_expr, GenericType):
        args = ", ".join(render_type(a, ctx) for a in type_expr.arguments)
        if type_expr.name == "Optional":
            ctx.typing.add("Optional")
            return f"Optional[{args}]"
        name = SEQUENCE_NAMES.get(type_expr.name) or MAPPING_NAMES.get(type_expr.name)
        if name in ("Sequence", "Mapping"):
            ctx.typing.add(name)
        if name is None:
            name = ctx.class_name(type_expr.name)
        return f"{name}[{args}]"

    raise TypeError(f"Cannot render type expression {type_expr!r}")


# =============================================================================
# Conversions
# =============================================================================


def render_converter(conversion: Conversion, names: Dict[Direction, str], ctx: _Context) -> str:
    """Expression evaluating to a converter callable."""
    kind = conversion.kind
    if kind is ConversionKind.IDENTITY:
        ctx.lifting.add("identity")
        return "identity"
    if kind is ConversionKind.APPLY:
        return names[conversion.direction]

    children = [render_converter(c, names, ctx) for c in conversion.children]
    if kind is ConversionKind.OPTIONAL:
        ctx.lifting.add("lift_optional")
        return f"lift_optional({children[0]})"
    if kind is ConversionKind.TUPLE:
        ctx.lifting.add("lift_tuple")
        return f"lift_tuple({', '.join(children)})"
    if kind is ConversionKind.SEQUENCE:
        ctx.lifting.add("lift_sequence")
        return f"lift_sequence({conversion.container}, {children[0]})"
    if kind is ConversionKind.MAPPING:
        ctx.lifting.add("lift_mapping")
        return f"lift_mapping({children[0]}, {children[1]})"
    if kind is ConversionKind.FUNCTION:
        ctx.lifting.add("lift_function")
        params = children[:-1]
        packed = "(" + ", ".join(params) + ("," if len(params) == 1 else "") + ")"
        return f"lift_function({packed}, {children[-1]})"
    raise ValueError(f"Unknown conversion kind: {kind!r}")


def _apply(conversion: Conversion, expr: str, names, ctx: _Context) -> str:
    if conversion.is_identity:
        return expr
    return f"{render_converter(conversion, names, ctx)}({expr})"


def _attr(obj: str, member: str) -> str:
    if member.isidentifier() and not keyword.iskeyword(member):
        return f"{obj}.{member}"
    return f"getattr({obj}, {member!r})"


# =============================================================================
# Members
# =============================================================================


def _render_transform(spec: WitnessSpec, transform: TransformDef, ctx: _Context) -> List[str]:
    cls = ctx.class_name(spec.struct_name)
    names = {p.direction: p.name for p in transform.parameters}
    params = ", ".join(f"{p.name}: {render_type(p.type, ctx)}" for p in transform.parameters)
    result = f"{cls}[{', '.join(str(a) for a in transform.result_type.arguments)}]"

    lines = [f"def {transform.name}(self, {params}) -> {result}:"]
    if not transform.rewrites:
        lines.append(f"{INDENT}return {cls}()")
        return lines

    lines.append(f"{INDENT}return {cls}(")
    for rewrite in transform.rewrites:
        access = _attr("self", rewrite.field)
        if rewrite.is_passthrough:
            value = access
        else:
            args = [f"b{i}" for i in range(len(rewrite.arguments))]
            call_args = ", ".join(
                _apply(c, a, names, ctx) for c, a in zip(rewrite.arguments, args)
            )
            body = _apply(rewrite.result, f"{access}({call_args})", names, ctx)
            lambda_params = f" {', '.join(args)}" if args else ""
            value = f"lambda{lambda_params}: {body}"
        lines.append(f"{INDENT * 2}{rewrite.field}={value},")
    lines.append(f"{INDENT})")
    return lines


def _render_fold(spec: WitnessSpec, helper: FoldHelper, ctx: _Context) -> List[str]:
    ctx.functools = True
    ctx.missing_sentinel = True
    ctx.typing.update({"Any", "Iterable"})
    a = spec.subject
    operation = _attr("self", helper.operation)
    lines = [
        f"def {helper.name}(self, values: Iterable[{a}], initial: Any = _MISSING) -> {a}:",
        f'{INDENT}"""Reduce ``values`` with ``{helper.operation}``."""',
        f"{INDENT}if initial is _MISSING:",
    ]
    if helper.identity is not None:
        lines.append(f"{INDENT * 2}initial = {_attr('self', helper.identity)}()")
    else:
        lines.append(f"{INDENT * 2}return functools.reduce({operation}, values)")
    lines.append(f"{INDENT}return functools.reduce({operation}, values, initial)")
    return lines


def _render_conformance(spec: WitnessSpec, init: ConformanceInit, ctx: _Context) -> List[str]:
    ctx.typing.add("Any")
    cls = ctx.class_name(spec.struct_name)
    nested = [spec.field_named(name) for name in init.nested_fields]
    nested_params = "".join(f", {f.name}: {render_type(f.type, ctx)}" for f in nested)
    if nested:
        nested_params = ", *" + nested_params
    generics = ", ".join(["Any", *spec.associated_parameters])

    lines = [
        "@classmethod",
        f"def {init.name}(cls, conforming: Any{nested_params}) -> {cls}[{generics}]:",
        f'{INDENT}"""Build the witness from a type conforming to {spec.interface}."""',
    ]
    if not init.bindings:
        lines.append(f"{INDENT}return cls()")
        return lines

    lines.append(f"{INDENT}return cls(")
    for binding in init.bindings:
        params = ", ".join(binding.parameters)
        if binding.kind is BindingKind.NESTED:
            value = binding.field
        elif binding.kind is BindingKind.INSTANCE_METHOD:
            head = ", ".join(["subject", *binding.parameters])
            value = f"lambda {head}: {_attr('subject', binding.member)}({params})"
        elif binding.kind is BindingKind.STATIC_METHOD:
            head = f" {params}" if params else ""
            value = f"lambda{head}: {_attr('conforming', binding.member)}({params})"
        elif binding.kind is BindingKind.INSTANCE_PROPERTY:
            value = f"lambda subject: {_attr('subject', binding.member)}"
        else:
            value = f"lambda: {_attr('conforming', binding.member)}"
        lines.append(f"{INDENT * 2}{binding.field}={value},")
    lines.append(f"{INDENT})")
    return lines


def _render_field(f: WitnessField, ctx: _Context) -> str:
    return f"{f.name}: {render_type(f.type, ctx)}"


def render_witness(
    spec: WitnessSpec,
    transforms: Sequence[TransformDef] = (),
    ctx: Optional[_Context] = None,
) -> str:
    """Source of one witness class."""
    ctx = ctx or _Context({spec.struct_name: rendered_class_name(spec)})
    cls = ctx.class_name(spec.struct_name)

    body: List[List[str]] = []
    header = [f'"""Witness for the {spec.interface} interface."""']
    fields = [_render_field(f, ctx) for f in spec.fields]
    body.append(header + ([""] + fields if fields else []))

    for transform in transforms:
        body.append(_render_transform(spec, transform, ctx))
    for helper in fold_helpers(spec):
        body.append(_render_fold(spec, helper, ctx))
    init = conformance_init(spec)
    if init is not None:
        body.append(_render_conformance(spec, init, ctx))

    lines = [
        "@dataclass(frozen=True)",
        f"class {cls}(Generic[{', '.join(spec.generic_parameters)}]):",
    ]
    for index, block in enumerate(body):
        if index:
            lines.append("")
        lines.extend(f"{INDENT}{line}" if line else "" for line in block)
    return "\n".join(lines)


# =============================================================================
# Module
# =============================================================================


def rendered_class_name(spec: WitnessSpec) -> str:
    if spec.access_level is AccessLevel.PRIVATE:
        return f"_{spec.struct_name}"
    return spec.struct_name


def render_module(
    witnesses: Sequence[Tuple[WitnessSpec, Sequence[TransformDef]]],
    settings: Optional[GeneratorSettings] = None,
) -> str:
    """Source of a module holding every given witness."""
    settings = settings or DEFAULT_SETTINGS
    ctx = _Context({spec.struct_name: rendered_class_name(spec) for spec, _ in witnesses})

    classes = [render_witness(spec, transforms, ctx) for spec, transforms in witnesses]

    type_vars: List[str] = []
    for spec, transforms in witnesses:
        for name in spec.generic_parameters:
            if name not in type_vars:
                type_vars.append(name)
        if transforms and spec.transform_label not in type_vars:
            type_vars.append(spec.transform_label)

    public = [
        ctx.class_name(spec.struct_name)
        for spec, _ in witnesses
        if spec.access_level is AccessLevel.PUBLIC
    ]
    interfaces = ", ".join(spec.interface for spec, _ in witnesses) or "none"

    lines: List[str] = []
    if settings.emit_header:
        lines.append(HEADER)
    lines.append(f'"""Witnesses for: {interfaces}."""')
    lines.append("")
    lines.append("from __future__ import annotations")
    lines.append("")
    if ctx.functools:
        lines.append("import functools")
    lines.append("from dataclasses import dataclass")
    lines.append(f"from typing import {', '.join(sorted(ctx.typing))}")
    if ctx.lifting:
        lines.append("")
        lines.append(f"from witnesskit.runtime.lifting import {', '.join(sorted(ctx.lifting))}")
    lines.append("")
    lines.append("__all__ = [" + ", ".join(repr(name) for name in public) + "]")
    lines.append("")
    lines.extend(f'{name} = TypeVar("{name}")' for name in type_vars)
    if ctx.missing_sentinel:
        lines.append("")
        lines.append("_MISSING = object()")

    for source in classes:
        lines.append("")
        lines.append("")
        lines.append(source)

    logger.debug(f"{tags.RENDER} Rendered {len(classes)} witness class(es)")
    return "\n".join(lines) + "\n"
