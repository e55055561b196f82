# witnesskit/cli/cli.py
"""
witnesskit CLI - Main application.

Commands:
    witnesskit generate FILE    Render witnesses for an interface document
    witnesskit inspect FILE     Show variances and transformer kinds
    witnesskit check FILE       Validate a document, exit 1 on any failure

NOTE: Commands use lazy loading - the generator is only imported when a command is invoked.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="witnesskit",
    help="Generate protocol witnesses from interface documents.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Generate protocol witnesses from interface documents."""
    from witnesskit.logging.logger import configure_logging

    configure_logging(logging.DEBUG if verbose else logging.WARNING)


# =============================================================================
# LAZY COMMANDS
# =============================================================================


@app.command("generate")
def generate(
    source: Path = typer.Argument(..., help="Interface document (YAML)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the module here instead of stdout."),
    settings: Optional[Path] = typer.Option(None, "--settings", "-s", help="Generator settings file."),
) -> None:
    """Render witnesses for every interface in a document."""
    from witnesskit.cli.commands import generate as mod

    mod.command(source=source, output=output, settings=settings)


@app.command("inspect")
def inspect(
    source: Path = typer.Argument(..., help="Interface document (YAML)."),
    settings: Optional[Path] = typer.Option(None, "--settings", "-s", help="Generator settings file."),
) -> None:
    """Show requirement variances and the transformer each witness gets."""
    from witnesskit.cli.commands import inspect as mod

    mod.command(source=source, settings=settings)


@app.command("check")
def check(
    source: Path = typer.Argument(..., help="Interface document (YAML)."),
    settings: Optional[Path] = typer.Option(None, "--settings", "-s", help="Generator settings file."),
) -> None:
    """Validate a document; exits with status 1 if any interface fails."""
    from witnesskit.cli.commands import check as mod

    mod.command(source=source, settings=settings)


if __name__ == "__main__":
    app()
