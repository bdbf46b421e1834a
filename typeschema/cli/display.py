"""
Rich terminal display utilities for CLI.

Provides formatted output using the Rich library for:
- Syntax-highlighted JSON
- Error messages
- Classification and definitions tables
"""

import json
from typing import Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from typeschema.registry.classifier import Classification
from typeschema.registry.definitions import DefinitionsTable


console = Console()


def print_header(title: str) -> None:
    """Print a formatted header."""
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    console.print("=" * len(title))
    console.print()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with X mark."""
    console.print(f"[red]✗[/red] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]ℹ[/blue] {escape(message)}")


def print_json(data: Any, title: Optional[str] = None) -> None:
    """
    Print JSON data with syntax highlighting.

    Args:
        data: JSON-serializable data or JSON string
        title: Optional title for the panel
    """
    if isinstance(data, str):
        json_str = data
    else:
        json_str = json.dumps(data, indent=2)

    syntax = Syntax(json_str, "json", theme="monokai", line_numbers=False)

    if title:
        panel = Panel(syntax, title=f"[bold]{title}[/bold]", border_style="cyan")
        console.print(panel)
    else:
        console.print(syntax)


def print_classification(classification: Classification) -> None:
    """Print how a root type was classified."""
    table = Table(title="Classification", show_header=True, header_style="bold cyan")
    table.add_column("Field", style="cyan", width=14)
    table.add_column("Value", style="white")

    table.add_row("Type", escape(repr(classification.type)))
    table.add_row("Kind", classification.kind.value)
    if classification.inner is not None:
        table.add_row("Inner type", escape(repr(classification.inner)))
    if classification.contract is not None:
        table.add_row("Contract", type(classification.contract).__name__)

    console.print()
    console.print(table)


def print_definitions(definitions: DefinitionsTable) -> None:
    """
    Print a summary table of registered definitions.

    Args:
        definitions: Table filled by the registry
    """
    table = Table(title="Definitions", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="white", width=10)
    table.add_column("Properties", justify="right")
    table.add_column("Required", style="yellow")

    for name, schema in definitions.items():
        table.add_row(
            escape(name),
            schema.type or "-",
            str(len(schema.properties or {})),
            ", ".join(schema.required or []) or "-",
        )

    console.print()
    console.print(table)
    console.print()
