"""
CLI command implementations.

This module contains the business logic for each CLI command:
- generate: Build a definitions document for one or more types
- inspect: Show how a type is classified and what it registers
"""

import importlib
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.logging import RichHandler

from typeschema.config import SchemaConfig
from typeschema.document import generate_document
from typeschema.registry.classifier import classify
from typeschema.registry.filters import DocstringDescriptionFilter

from .display import (
    console,
    print_classification,
    print_definitions,
    print_header,
    print_info,
    print_json,
    print_success,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def import_type(reference: str, app_dir: Optional[Path] = None) -> Any:
    """
    Import a type from a "package.module:Name" reference.

    Nested names are supported ("module:Outer.Inner").

    Args:
        reference: Import reference
        app_dir: Directory put on sys.path before importing

    Returns:
        The referenced object

    Raises:
        ValueError: If the reference is malformed or cannot be imported
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Type reference must look like 'package.module:Name', got {reference!r}")

    if app_dir is not None:
        path = str(app_dir.resolve())
        if path not in sys.path:
            sys.path.insert(0, path)

    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Could not import module {module_name!r}: {e}")

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise ValueError(f"Module {module_name!r} has no attribute {attr_path!r}")

    return target


def build_config(ref_prefix: Optional[str], max_definitions: Optional[int], docstrings: bool) -> SchemaConfig:
    """Translate CLI options into a SchemaConfig."""
    config = SchemaConfig()
    if ref_prefix is not None:
        config.ref_prefix(ref_prefix)
    if max_definitions is not None:
        config.max_definitions(max_definitions)
    if docstrings:
        config.schema_filter(DocstringDescriptionFilter())
    return config


def generate_command(
    type_refs: List[str],
    output_path: Optional[Path],
    app_dir: Optional[Path],
    ref_prefix: Optional[str],
    max_definitions: Optional[int],
    docstrings: bool,
    verbose: bool,
) -> None:
    """
    Execute the generate command.

    Args:
        type_refs: "package.module:Name" references, registered in order
        output_path: Optional path to write the document to
        app_dir: Directory added to sys.path for imports
        ref_prefix: Pointer prefix override
        max_definitions: Definitions ceiling
        docstrings: Add class docstrings as descriptions
        verbose: Enable debug logging
    """
    setup_logging(verbose)

    if not type_refs:
        raise ValueError("At least one --type is required")

    types = [import_type(ref, app_dir) for ref in type_refs]
    config = build_config(ref_prefix, max_definitions, docstrings)
    document = generate_document(types, config=config)

    if output_path is not None:
        output_path.write_text(document.to_json())
        print_success(
            f"Wrote {len(document.schemas)} schema(s) and "
            f"{len(document.definitions)} definition(s) to {output_path}"
        )
    elif sys.stdout.isatty():
        print_json(document.to_dict())
    else:
        # Piped: plain JSON, never wrapped to the console width
        typer.echo(document.to_json())


def inspect_command(type_ref: str, app_dir: Optional[Path], show_schema: bool, verbose: bool) -> None:
    """
    Execute the inspect command.

    Args:
        type_ref: "package.module:Name" reference
        app_dir: Directory added to sys.path for imports
        show_schema: Also print the generated document
        verbose: Enable debug logging
    """
    setup_logging(verbose)
    print_header("typeschema - Inspect")

    type_ = import_type(type_ref, app_dir)
    registry = SchemaConfig().create_registry()

    print_classification(classify(type_, registry.contract_resolver,
                                  custom_mappings=registry.custom_mappings,
                                  transport_types=registry.transport_types))

    root = registry.find_or_register(type_)
    print_info(f"Root schema: {root.to_dict()}")

    if registry.definitions:
        print_definitions(registry.definitions)
    else:
        print_info("No definitions registered")

    if show_schema:
        print_json(registry.definitions.to_dict(), title="Definitions")
