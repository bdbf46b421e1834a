"""
typeschema: JSON Schema definitions from Python types

typeschema turns arbitrary Python types - builtin scalars, typing generics,
collections, enums, Optional wrappers, pydantic models, dataclasses and plain
annotated classes - into JSON-Schema-like descriptions, deduplicating complex
types into a flat table of named definitions.

Key Features:
    - Handles recursive and mutually recursive type graphs without recursion
    - Deterministic output, independent of traversal order
    - Case-insensitive, first-writer-wins definitions table
    - Pluggable custom type mappings and ordered schema filters
    - Validation annotations from pydantic Field(...) and Annotated metadata

Quick Start:
    ```python
    from typing import List, Optional
    from pydantic import BaseModel
    from typeschema import SchemaRegistry

    class OrderItem(BaseModel):
        sku: str
        order: Optional["Order"] = None

    class Order(BaseModel):
        id: int
        items: List[OrderItem]

    registry = SchemaRegistry()
    root = registry.find_or_register(Order)

    print(root.to_dict())                  # {"$ref": "#/definitions/Order"}
    print(registry.definitions.to_dict())  # {"Order": {...}, "OrderItem": {...}}
    ```

Architecture:
    1. Classifier: Tag each type (custom, primitive, nullable, enum, ...)
    2. Contract Resolver: Describe arrays, maps and object members
    3. Registry: Build schemas, queue complex types, drain the queue
    4. Filters: Post-process each object schema in registration order
"""

__version__ = "0.1.0"

from typeschema.config import RegistrySettings, SchemaConfig  # noqa: F401
from typeschema.document import SchemaDocument, generate_document  # noqa: F401
from typeschema.registry import SchemaFilter, SchemaRegistry  # noqa: F401
from typeschema.schema import Schema  # noqa: F401

__all__ = [
    "RegistrySettings",
    "Schema",
    "SchemaConfig",
    "SchemaDocument",
    "SchemaFilter",
    "SchemaRegistry",
    "generate_document",
]
