"""
Document fragment assembly.

The registry produces one root schema per call plus a shared definitions
table. This module bundles both into the fragment a document assembler embeds
under its definitions section.

Usage:
    ```python
    from typeschema.document import generate_document

    document = generate_document([Order, Customer])
    document.to_dict()
    # {
    #     "schemas": {"Order": {"$ref": "#/definitions/Order"}, ...},
    #     "definitions": {"Order": {...}, "OrderItem": {...}, "Customer": {...}}
    # }
    ```
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from typeschema.config import SchemaConfig
from typeschema.contracts.naming import friendly_id
from typeschema.registry.definitions import DefinitionsTable
from typeschema.registry.registry import SchemaRegistry
from typeschema.schema.types import Schema

logger = logging.getLogger(__name__)


@dataclass
class SchemaDocument:
    """
    Root schemas and the definitions they reference.

    Attributes:
        schemas: Root type name -> root schema, in registration order
        definitions: Definitions accumulated while registering the roots
    """

    schemas: Dict[str, Schema] = field(default_factory=dict)
    definitions: DefinitionsTable = field(default_factory=DefinitionsTable)

    def to_dict(self) -> Dict[str, Any]:
        """Render the fragment to its JSON-ready form."""
        return {
            "schemas": {name: schema.to_dict() for name, schema in self.schemas.items()},
            "definitions": self.definitions.to_dict(),
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Serialize the fragment to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


def generate_document(
    types: Iterable[Any],
    registry: Optional[SchemaRegistry] = None,
    config: Optional[SchemaConfig] = None,
) -> SchemaDocument:
    """
    Register a sequence of root types and collect the result.

    Args:
        types: Root types, registered in order
        registry: Registry to accumulate into (default: built from config)
        config: Configuration used when no registry is given

    Returns:
        SchemaDocument: Root schemas plus the registry's definitions table
    """
    if registry is None:
        registry = (config or SchemaConfig()).create_registry()

    schemas: Dict[str, Schema] = {}
    for type_ in types:
        name = friendly_id(type_)
        schemas[name] = registry.find_or_register(type_)
        logger.info(f"Generated schema for {name} ({len(registry.definitions)} definitions so far)")

    return SchemaDocument(schemas=schemas, definitions=registry.definitions)
