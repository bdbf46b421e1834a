"""
Schema node module.

This module holds the output side of the registry: the Schema node, the fixed
primitive mapping table and the validation annotations applied to members.

Components:
    - types: Schema dataclass and its wire rendering
    - primitives: Scalar type -> (type, format) table
    - validation: Member constraint collection and application

Example:
    ```python
    from typeschema.schema import PRIMITIVE_MAPPINGS

    schema = PRIMITIVE_MAPPINGS[int]()
    schema.to_dict()  # {"type": "integer", "format": "int64"}
    ```
"""

from typeschema.schema.primitives import PRIMITIVE_MAPPINGS, SchemaFactory, is_primitive
from typeschema.schema.types import Schema
from typeschema.schema.validation import apply_validation, collect_constraints

__all__ = [
    "Schema",
    "SchemaFactory",
    "PRIMITIVE_MAPPINGS",
    "is_primitive",
    "apply_validation",
    "collect_constraints",
]
