"""
Member validation annotations.

Members may declare validation constraints (string length, numeric range,
pattern, ...) through pydantic `Field(...)` arguments or `Annotated[...]`
metadata. This module normalizes those declarations into a flat constraint
dict and applies them onto the member's schema node.

Usage:
    ```python
    from typing import Annotated
    from annotated_types import Ge, MaxLen

    constraints = collect_constraints([Ge(0), MaxLen(10)])
    # {"ge": 0, "max_length": 10}

    schema = apply_validation(Schema(type="string"), constraints)
    ```
"""

from typing import Any, Dict, Iterable

from typeschema.schema.types import Schema

CONSTRAINT_KEYS = ("gt", "ge", "lt", "le", "multiple_of", "min_length", "max_length", "pattern")


def collect_constraints(metadata: Iterable[Any]) -> Dict[str, Any]:
    """
    Flatten constraint metadata objects into a constraint dict.

    Any object exposing one of the recognized attributes contributes, which
    covers annotated-types markers (Gt, Ge, Interval, Len, MinLen, ...),
    pydantic's general metadata and `StringConstraints`. Later entries win.

    Args:
        metadata: Metadata objects from FieldInfo.metadata or Annotated[...]

    Returns:
        Dict: Constraint name -> value
    """
    constraints: Dict[str, Any] = {}
    for item in metadata:
        for key in CONSTRAINT_KEYS:
            value = getattr(item, key, None)
            if value is None:
                continue
            if key == "pattern" and hasattr(value, "pattern"):
                # Compiled regex
                value = value.pattern
            constraints[key] = value
    return constraints


def apply_validation(schema: Schema, constraints: Dict[str, Any]) -> Schema:
    """
    Copy validation constraints onto a schema node in place.

    Length constraints become minItems/maxItems on arrays and
    minLength/maxLength on everything else. Strict bounds (gt/lt) are
    rendered Swagger 2.0 style: minimum/maximum plus an exclusive flag.

    Args:
        schema: Member schema to annotate
        constraints: Output of collect_constraints()

    Returns:
        Schema: The same node, for chaining
    """
    if not constraints:
        return schema

    if "min_length" in constraints:
        if schema.type == "array":
            schema.min_items = constraints["min_length"]
        else:
            schema.min_length = constraints["min_length"]
    if "max_length" in constraints:
        if schema.type == "array":
            schema.max_items = constraints["max_length"]
        else:
            schema.max_length = constraints["max_length"]

    if "ge" in constraints:
        schema.minimum = constraints["ge"]
    elif "gt" in constraints:
        schema.minimum = constraints["gt"]
        schema.exclusive_minimum = True

    if "le" in constraints:
        schema.maximum = constraints["le"]
    elif "lt" in constraints:
        schema.maximum = constraints["lt"]
        schema.exclusive_maximum = True

    if "multiple_of" in constraints:
        schema.multiple_of = constraints["multiple_of"]
    if "pattern" in constraints:
        schema.pattern = constraints["pattern"]

    return schema
