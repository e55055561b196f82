# witnesskit/runtime/witness.py
"""
In-process witnesses.

build_witness_class() turns a WitnessSpec and its transformers into a real
Python class without rendering or executing source code:

    >>> spec = emit(combinable)
    >>> CombinableWitness = build_witness_class(spec, emit_transforms(combinable, spec))
    >>> int_sum = CombinableWitness(combine=lambda a, b: a + b)
    >>> str_sum = int_sum.iso(to=int, from_=str)
    >>> str_sum.combine("1", "2")
    '3'

Instances are frozen dataclasses whose fields hold the witness functions.
"""

from __future__ import annotations

import dataclasses
import functools
import operator
from typing import Any, Callable, ClassVar, Dict, Generic, Optional, Sequence, TypeVar, Union

from witnesskit.codegen.emitter import WitnessSpec
from witnesskit.codegen.transforms import Direction, TransformDef
from witnesskit.codegen.utilities import (
    BindingKind,
    ConformanceInit,
    FoldHelper,
    conformance_init,
    fold_helpers,
)
from witnesskit.codegen.variance import TransformKind
from witnesskit.runtime.lifting import rewrite_value
from witnesskit.runtime.registry import register as register_witness

_MISSING = object()


class Witness:
    """Base class of every in-process witness."""

    __witness_spec__: ClassVar[Optional[WitnessSpec]] = None

    @classmethod
    def field_names(cls) -> tuple:
        return tuple(f.name for f in dataclasses.fields(cls))

    def replace(self, **changes: Any) -> "Witness":
        """Copy of this witness with some fields swapped."""
        return dataclasses.replace(self, **changes)

    def register(self, subject_type: Union[type, str], label: Optional[str] = None) -> None:
        """Register this witness in the process-wide registry."""
        register_witness(self, subject_type, label)


# =============================================================================
# Transformers
# =============================================================================


def _rebuild(witness: Witness, transform: TransformDef, functions: Dict[Direction, Callable]):
    values = {
        rewrite.field: rewrite_value(getattr(witness, rewrite.field), rewrite, functions)
        for rewrite in transform.rewrites
    }
    return type(witness)(**values)


def _transform_method(definition: TransformDef) -> Callable:
    if definition.kind is TransformKind.MAP:

        def map(self, transform):
            return _rebuild(self, definition, {Direction.FROM: transform})

        return map

    if definition.kind is TransformKind.PULLBACK:

        def pullback(self, transform):
            return _rebuild(self, definition, {Direction.TO: transform})

        return pullback

    def iso(self, to, from_):
        return _rebuild(self, definition, {Direction.TO: to, Direction.FROM: from_})

    return iso


# =============================================================================
# Utilities
# =============================================================================


def _fold_method(helper: FoldHelper) -> Callable:
    def fold(self, values, initial=_MISSING):
        operation = getattr(self, helper.operation)
        if initial is _MISSING and helper.identity is not None:
            initial = getattr(self, helper.identity)()
        if initial is _MISSING:
            return functools.reduce(operation, values)
        return functools.reduce(operation, values, initial)

    fold.__name__ = helper.name
    fold.__doc__ = f"Reduce ``values`` with ``{helper.operation}``."
    return fold


def _instance_method(member: str) -> Callable:
    def call(subject, *args):
        return getattr(subject, member)(*args)

    return call


def _static_method(conforming: Any, member: str) -> Callable:
    def call(*args):
        return getattr(conforming, member)(*args)

    return call


def _static_property(conforming: Any, member: str) -> Callable:
    def read():
        return getattr(conforming, member)

    return read


def _conformance_method(init: ConformanceInit) -> classmethod:
    def from_conformance(cls, conforming, **nested):
        missing = [name for name in init.nested_fields if name not in nested]
        if missing:
            raise TypeError(f"{cls.__name__}.{init.name}() missing nested witness(es): {missing}")

        values = {}
        for binding in init.bindings:
            if binding.kind is BindingKind.NESTED:
                values[binding.field] = nested[binding.field]
            elif binding.kind is BindingKind.INSTANCE_METHOD:
                values[binding.field] = _instance_method(binding.member)
            elif binding.kind is BindingKind.STATIC_METHOD:
                values[binding.field] = _static_method(conforming, binding.member)
            elif binding.kind is BindingKind.INSTANCE_PROPERTY:
                values[binding.field] = operator.attrgetter(binding.member)
            else:
                values[binding.field] = _static_property(conforming, binding.member)
        return cls(**values)

    from_conformance.__name__ = init.name
    return classmethod(from_conformance)


# =============================================================================
# Class Construction
# =============================================================================


def build_witness_class(
    spec: WitnessSpec,
    transforms: Sequence[TransformDef] = (),
    module: Optional[str] = None,
) -> type:
    """
    Materialize a witness class.

    The class is a frozen dataclass, generic over the spec's parameters,
    whose constructor takes every field as a keyword argument.
    """
    type_params = tuple(TypeVar(name) for name in spec.generic_parameters)

    namespace: Dict[str, Any] = {
        "__witness_spec__": spec,
        "__doc__": f"Witness for the {spec.interface} interface.",
    }
    for transform in transforms:
        namespace[transform.name] = _transform_method(transform)
    for helper in fold_helpers(spec):
        namespace[helper.name] = _fold_method(helper)
    init = conformance_init(spec)
    if init is not None:
        namespace[init.name] = _conformance_method(init)

    cls = dataclasses.make_dataclass(
        spec.struct_name,
        [(f.name, Any) for f in spec.fields],
        bases=(Witness, Generic[type_params]),
        namespace=namespace,
        frozen=True,
    )
    if module is not None:
        cls.__module__ = module
    return cls
