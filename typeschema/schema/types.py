"""
Schema node definition.

This module defines the Schema dataclass - the single node type produced by the
registry. A Schema is either a structural description (type, format, items,
properties, ...) or a reference to a named definition (ref only).

Node Shapes:
    Schema
    ├── primitive leaf:   {"type": "integer", "format": "int32"}
    ├── enum:             {"type": "string", "enum": ["Red", "Green"]}
    ├── array:            {"type": "array", "items": <Schema>}
    ├── map:              {"type": "object", "additionalProperties": <Schema>}
    ├── object:           {"type": "object", "properties": {...}, "required": [...]}
    ├── opaque object:    {"type": "object"}
    └── reference:        {"$ref": "Order"}

Each node knows how to:
    - Render itself to a JSON-ready dict (to_dict)
    - Report whether it is a bare reference (is_reference)
    - Visit its nested nodes (children)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union


@dataclass
class Schema:
    """
    Structural description of one type.

    Example wire form:
        {
            "type": "object",
            "properties": {
                "id": {"type": "integer", "format": "int32"},
                "items": {"type": "array", "items": {"$ref": "OrderItem"}}
            },
            "required": ["id", "items"]
        }

    Attributes:
        type: One of object, array, string, integer, number, boolean (None for references)
        format: Refinement of type (int32, int64, float, double, byte, date-time)
        ref: Name of a definition this node points to
        items: Element schema when type is array
        additional_properties: Value schema when type is object and represents a map
        properties: Member name -> member schema, in discovery order
        required: Required member names, None when there are none (never empty)
        enum: Symbolic member names for enum types
        extensions: Vendor extensions (x-...) added by filters
    """

    type: Optional[str] = None
    format: Optional[str] = None
    ref: Optional[str] = None
    items: Optional["Schema"] = None
    additional_properties: Optional["Schema"] = None
    properties: Optional[Dict[str, "Schema"]] = None
    required: Optional[List[str]] = None
    enum: Optional[List[str]] = None
    description: Optional[str] = None

    # Validation annotations
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    exclusive_minimum: Optional[bool] = None
    exclusive_maximum: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    pattern: Optional[str] = None
    multiple_of: Optional[Union[int, float]] = None

    extensions: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_reference(self) -> bool:
        """True when this node only points at a definition."""
        return self.ref is not None and self.type is None

    def children(self) -> Iterator["Schema"]:
        """Yield the directly nested schema nodes (items, map values, properties)."""
        if self.items is not None:
            yield self.items
        if self.additional_properties is not None:
            yield self.additional_properties
        if self.properties:
            yield from self.properties.values()

    def to_dict(self) -> Dict[str, Any]:
        """
        Render this node to its JSON-ready wire form.

        Unset attributes are omitted, nested nodes are rendered recursively and
        vendor extensions are merged last.

        Returns:
            Dict: JSON-serializable schema dictionary

        Example:
            ```python
            Schema(type="array", items=Schema(ref="Order")).to_dict()
            # {"type": "array", "items": {"$ref": "Order"}}
            ```
        """
        result: Dict[str, Any] = {}

        if self.ref is not None:
            result["$ref"] = self.ref
        if self.type is not None:
            result["type"] = self.type
        if self.format is not None:
            result["format"] = self.format
        if self.description is not None:
            result["description"] = self.description
        if self.items is not None:
            result["items"] = self.items.to_dict()
        if self.additional_properties is not None:
            result["additionalProperties"] = self.additional_properties.to_dict()
        if self.properties is not None:
            result["properties"] = {
                name: prop.to_dict() for name, prop in self.properties.items()
            }
        if self.required:
            result["required"] = list(self.required)
        if self.enum is not None:
            result["enum"] = list(self.enum)

        for key, value in _VALIDATION_KEYS.items():
            attr = getattr(self, key)
            if attr is not None:
                result[value] = attr

        result.update(self.extensions)
        return result


# Attribute name -> wire name for validation annotations
_VALIDATION_KEYS = {
    "minimum": "minimum",
    "exclusive_minimum": "exclusiveMinimum",
    "maximum": "maximum",
    "exclusive_maximum": "exclusiveMaximum",
    "min_length": "minLength",
    "max_length": "maxLength",
    "min_items": "minItems",
    "max_items": "maxItems",
    "pattern": "pattern",
    "multiple_of": "multipleOf",
}
