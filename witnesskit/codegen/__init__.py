# witnesskit/codegen/__init__.py
"""
Witness code generation.

Pipeline:
    InterfaceSchema -> emit() -> WitnessSpec -> emit_transforms() -> TransformDef
                                     |
                                     └-> render_module() -> Python source

Usage:
    from witnesskit.codegen import WitnessGenerator

    report = WitnessGenerator().generate_all(schemas)
"""

from witnesskit.codegen.emitter import FieldKind, WitnessField, WitnessSpec, emit
from witnesskit.codegen.generator import (
    GeneratedWitness,
    GenerationFailure,
    GenerationReport,
    WitnessGenerator,
)
from witnesskit.codegen.renderer import render_module, render_witness
from witnesskit.codegen.transforms import TransformDef, emit_transforms
from witnesskit.codegen.variance import (
    TransformKind,
    Variance,
    classify,
    transform_kind,
    variance,
    variance_of,
)

__all__ = [
    "FieldKind",
    "WitnessField",
    "WitnessSpec",
    "emit",
    "TransformDef",
    "emit_transforms",
    "TransformKind",
    "Variance",
    "classify",
    "transform_kind",
    "variance",
    "variance_of",
    "render_module",
    "render_witness",
    "GeneratedWitness",
    "GenerationFailure",
    "GenerationReport",
    "WitnessGenerator",
]
