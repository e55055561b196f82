# witnesskit/codegen/generator.py
"""
Witness generator.

Runs the emit -> transform pipeline for each schema and collects the results:

    generator = WitnessGenerator()
    report = generator.generate_all(schemas)

    if report.success:
        source = generator.render(report)
    else:
        for failure in report.failures:
            print(failure)

A schema either produces a complete witness or a GenerationFailure; one bad
schema never prevents the others from generating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from witnesskit.codegen.emitter import WitnessSpec, emit
from witnesskit.codegen.renderer import render_module
from witnesskit.codegen.transforms import TransformDef, emit_transforms
from witnesskit.codegen.utilities import (
    ConformanceInit,
    FoldHelper,
    conformance_init,
    fold_helpers,
)
from witnesskit.core.config import DEFAULT_SETTINGS, GeneratorSettings
from witnesskit.core.exceptions import WitnessError
from witnesskit.core.schema import InterfaceSchema, check_unique_names
from witnesskit.logging import tags
from witnesskit.logging.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeneratedWitness:
    """Everything generated for one interface."""

    spec: WitnessSpec
    transforms: Tuple[TransformDef, ...] = ()
    fold_helpers: Tuple[FoldHelper, ...] = ()
    conformance: Optional[ConformanceInit] = None

    @property
    def interface(self) -> str:
        return self.spec.interface

    @property
    def transform(self) -> Optional[TransformDef]:
        return self.transforms[0] if self.transforms else None


@dataclass(frozen=True)
class GenerationFailure:
    """Diagnostic for a schema that produced no witness."""

    interface: str
    message: str
    requirement: Optional[str] = None

    def __str__(self) -> str:
        if self.requirement:
            return f"{self.interface}.{self.requirement}: {self.message}"
        return f"{self.interface}: {self.message}"


@dataclass
class GenerationReport:
    """Results of a generation run, in input order."""

    results: List[GeneratedWitness] = field(default_factory=list)
    failures: List[GenerationFailure] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures

    def witness_for(self, interface: str) -> Optional[GeneratedWitness]:
        for result in self.results:
            if result.interface == interface:
                return result
        return None

    def record(self, error: WitnessError, interface: str) -> GenerationFailure:
        """Add a failure for an interface that produced no witness."""
        failure = _failure(error, interface)
        self.failures.append(failure)
        return failure


class WitnessGenerator:
    """
    Generates witnesses from interface schemas.

    Example:
        generator = WitnessGenerator()
        combinable = generator.generate(schema)
        combinable.spec.transform_kind  # TransformKind.ISO
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None):
        self.settings = settings or DEFAULT_SETTINGS

    def generate(self, schema: InterfaceSchema) -> GeneratedWitness:
        """
        Generate the witness for one schema.

        Raises:
            WitnessError: The schema cannot be turned into a witness
        """
        spec = emit(schema, self.settings)
        transforms = emit_transforms(schema, spec)
        return GeneratedWitness(
            spec=spec,
            transforms=transforms,
            fold_helpers=fold_helpers(spec),
            conformance=conformance_init(spec),
        )

    def generate_all(self, schemas: Sequence[InterfaceSchema]) -> GenerationReport:
        """Generate every schema, recording failures instead of raising."""
        report = GenerationReport()

        try:
            check_unique_names(schemas)
        except WitnessError as e:
            report.record(e, e.interface or "<unit>")
            logger.warning(f"{tags.EMIT} {e}")
            return report

        for schema in schemas:
            try:
                report.results.append(self.generate(schema))
            except WitnessError as e:
                failure = report.record(e, schema.name)
                logger.warning(f"{tags.EMIT} Skipping {schema.name}: {failure}")

        logger.debug(
            f"{tags.EMIT} Generated {len(report.results)} witness(es), "
            f"{len(report.failures)} failure(s)"
        )
        return report

    def render(self, report: GenerationReport) -> str:
        """Python source for every successfully generated witness."""
        return render_module(
            [(result.spec, result.transforms) for result in report.results],
            self.settings,
        )

    def materialize(self, schema: InterfaceSchema, module: Optional[str] = None) -> type:
        """Generate a schema and build its witness class in-process."""
        from witnesskit.runtime.witness import build_witness_class

        generated = self.generate(schema)
        return build_witness_class(generated.spec, generated.transforms, module=module)


def _failure(error: WitnessError, interface: str) -> GenerationFailure:
    return GenerationFailure(
        interface=error.interface or interface,
        message=error.message,
        requirement=error.requirement,
    )


__all__ = [
    "GeneratedWitness",
    "GenerationFailure",
    "GenerationReport",
    "WitnessGenerator",
]
