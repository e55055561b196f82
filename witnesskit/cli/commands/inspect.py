# witnesskit/cli/commands/inspect.py
"""
Inspect command: show how each requirement uses the subject type.

Usage:
    witnesskit inspect examples/witnesses.yaml

Prints one table per interface with each field's type and variance, and the
transformer the witness gets.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from witnesskit.cli.commands._load import generate_document
from witnesskit.cli.ui import ui
from witnesskit.codegen.emitter import FieldKind
from witnesskit.codegen.generator import GeneratedWitness


def _show(result: GeneratedWitness) -> None:
    spec = result.spec
    title = (
        f"{spec.struct_name}[{', '.join(spec.generic_parameters)}]  "
        f"transform: {spec.transform_kind.value}  access: {spec.access_level.value}"
    )
    table = ui.table(title, ["Field", "Kind", "Type", "Variance"], no_wrap=("Field", "Variance"))
    for f in spec.fields:
        variance = "-" if f.kind is FieldKind.NESTED else f.variance.value
        kind = f"static {f.kind.value}" if f.is_static else f.kind.value
        table.add_row(escape(f.name), kind, escape(str(f.type)), variance)
    ui.show(table)

    extras = [h.name for h in result.fold_helpers]
    if result.conformance is not None:
        extras.append(result.conformance.name)
    if extras:
        ui.print(f"  helpers: {', '.join(extras)}", style="dim")


def command(source: Path, settings: Optional[Path] = None) -> None:
    _, report = generate_document(source, settings)
    for result in report.results:
        _show(result)
    for failure in report.failures:
        ui.error(str(failure))

    if not report.success:
        raise typer.Exit(1)
