# witnesskit/cli/commands/generate.py
"""
Generate command: render witnesses as a Python module.

Usage:
    witnesskit generate examples/witnesses.yaml
    witnesskit generate examples/witnesses.yaml -o witnesses.py
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from witnesskit.cli.commands._load import generate_document
from witnesskit.cli.ui import ui


def command(source: Path, output: Optional[Path] = None, settings: Optional[Path] = None) -> None:
    """
    Render every interface of ``source``.

    Failed interfaces are reported and skipped; the others are still written.
    Exits with status 1 when any interface failed.
    """
    generator, report = generate_document(source, settings)
    for failure in report.failures:
        ui.error(str(failure))

    module = generator.render(report)
    if output is None:
        typer.echo(module, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(module, encoding="utf-8")
        ui.success(f"Wrote {len(report.results)} witness(es) to {output}")

    if not report.success:
        raise typer.Exit(1)
