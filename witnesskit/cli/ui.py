# witnesskit/cli/ui.py
"""
Shared output helpers for CLI commands.

Usage:
    from witnesskit.cli.ui import ui

    ui.success("Wrote witnesses.py")
    ui.error("interface 'Broken': duplicate witness field 'x'")
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


class UI:
    """Consistent styling for command output."""

    def print(self, msg: str, style: str = "") -> None:
        if style:
            console.print(f"[{style}]{escape(msg)}[/{style}]")
        else:
            console.print(escape(msg))

    def success(self, msg: str) -> None:
        console.print(f"[green]✓[/green] {escape(msg)}")

    def warning(self, msg: str) -> None:
        err_console.print(f"[yellow]⚠[/yellow] {escape(msg)}")

    def error(self, msg: str) -> None:
        err_console.print(f"[red]✗[/red] {escape(msg)}", highlight=False)

    def table(self, title: str, columns: list[str], no_wrap: tuple = ()) -> Table:
        table = Table(title=escape(title), show_lines=False)
        for column in columns:
            table.add_column(column, no_wrap=column in no_wrap)
        return table

    def show(self, renderable) -> None:
        console.print(renderable)

    def fail(self, msg: str, code: int = 1) -> None:
        """Print an error and exit."""
        self.error(msg)
        raise typer.Exit(code)


ui = UI()
