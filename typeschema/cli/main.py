"""
Main CLI entry point using Typer.

This module defines the command-line interface for typeschema using Typer.
It provides two commands: generate and inspect.
"""

from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from .commands import generate_command, inspect_command
from .display import print_error


app = typer.Typer(
    name="typeschema",
    help="typeschema - JSON Schema definitions from Python types",
    add_completion=False,
    rich_markup_mode="rich"
)


@app.command("generate")
def generate(
    types: Annotated[
        List[str],
        typer.Option("--type", "-t", help="Type to register as package.module:Name (repeatable)")
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Path to save the JSON document")
    ] = None,
    app_dir: Annotated[
        Path,
        typer.Option("--app-dir", help="Directory added to sys.path before importing types")
    ] = Path("."),
    ref_prefix: Annotated[
        Optional[str],
        typer.Option("--ref-prefix", help="Pointer prefix for root references")
    ] = None,
    max_definitions: Annotated[
        Optional[int],
        typer.Option("--max-definitions", help="Fail when more definitions would be registered")
    ] = None,
    docstrings: Annotated[
        bool,
        typer.Option("--docstrings", help="Use class docstrings as schema descriptions")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """
    Generate root schemas and definitions for one or more types.

    Example:
        typeschema generate \\
            --type shop.models:Order \\
            --type shop.models:Customer \\
            --output definitions.json
    """
    try:
        generate_command(
            type_refs=types,
            output_path=output,
            app_dir=app_dir,
            ref_prefix=ref_prefix,
            max_definitions=max_definitions,
            docstrings=docstrings,
            verbose=verbose
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.command("inspect")
def inspect(
    type_ref: Annotated[
        str,
        typer.Option("--type", "-t", help="Type to inspect as package.module:Name")
    ],
    app_dir: Annotated[
        Path,
        typer.Option("--app-dir", help="Directory added to sys.path before importing types")
    ] = Path("."),
    show_schema: Annotated[
        bool,
        typer.Option("--show-schema", help="Also print the generated definitions")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging")
    ] = False,
) -> None:
    """
    Show how a type is classified and which definitions it registers.

    Example:
        typeschema inspect --type shop.models:Order --show-schema
    """
    try:
        inspect_command(
            type_ref=type_ref,
            app_dir=app_dir,
            show_schema=show_schema,
            verbose=verbose
        )
    except Exception as e:
        print_error(f"Command failed: {e}")
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit")
    ] = False,
) -> None:
    """
    typeschema - JSON Schema definitions from Python types.
    """
    if version:
        from typeschema import __version__
        typer.echo(f"typeschema version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def cli() -> None:
    """CLI entry point for the console script."""
    app()


if __name__ == "__main__":
    cli()
