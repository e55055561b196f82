# witnesskit/cli/commands/check.py
"""
Check command: validate an interface document without writing anything.

Usage:
    witnesskit check examples/witnesses.yaml
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from witnesskit.cli.commands._load import generate_document
from witnesskit.cli.ui import ui


def command(source: Path, settings: Optional[Path] = None) -> None:
    _, report = generate_document(source, settings)
    for failure in report.failures:
        ui.error(str(failure))

    if not report.success:
        raise typer.Exit(1)
    ui.success(f"{len(report.results)} interface(s) OK")
