"""
Registry module.

Turns types into schemas and collects the named definitions they reference.

Components:
    - registry: SchemaRegistry and the worklist drain
    - classifier: Tagged classification (TypeKind) with a single dispatch order
    - definitions: Case-insensitive, first-writer-wins DefinitionsTable
    - filters: SchemaFilter hooks run after each object schema is built

Example:
    ```python
    from typeschema.registry import SchemaRegistry

    registry = SchemaRegistry()
    root = registry.find_or_register(Order)
    print(registry.definitions.to_dict())
    ```
"""

from typeschema.registry.classifier import DEFAULT_TRANSPORT_TYPES, Classification, TypeKind, classify
from typeschema.registry.definitions import DefinitionsTable
from typeschema.registry.filters import (
    CallableFilter,
    DocstringDescriptionFilter,
    SchemaFilter,
    VendorExtensionFilter,
    as_filter,
)
from typeschema.registry.registry import DEFAULT_REF_PREFIX, DefinitionLimitExceeded, SchemaRegistry

__all__ = [
    "DEFAULT_REF_PREFIX",
    "DEFAULT_TRANSPORT_TYPES",
    "CallableFilter",
    "Classification",
    "DefinitionLimitExceeded",
    "DefinitionsTable",
    "DocstringDescriptionFilter",
    "SchemaFilter",
    "SchemaRegistry",
    "TypeKind",
    "VendorExtensionFilter",
    "as_filter",
    "classify",
]
