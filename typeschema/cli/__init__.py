"""
Command-line interface module.

This module provides a rich terminal interface for typeschema using Typer and Rich.

Commands:
    - generate: Build a definitions document for one or more types
    - inspect: Show a type's classification and the definitions it registers

Example Usage:
    ```bash
    # Print the document for two root types
    typeschema generate --type shop.models:Order --type shop.models:Customer

    # Write it to a file, pointing references at OpenAPI 3 components
    typeschema generate \\
        --type shop.models:Order \\
        --ref-prefix "#/components/schemas/" \\
        --output definitions.json

    # Inspect a type
    typeschema inspect --type shop.models:Order --show-schema
    ```
"""

from .main import app

__all__ = ["app"]
