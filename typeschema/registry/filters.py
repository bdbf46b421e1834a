"""
Schema filters - post-processing hooks for object schemas.

A filter runs after an object schema is fully built and may mutate it in
place: add vendor extensions, enum constraints, descriptions, or adjust
properties and required. Filters run strictly in registration order, so a
later filter sees every edit made by earlier ones.

Filters receive the registry so they can register auxiliary types. They must
not inline a self-referential expansion back into a schema; that would undo
the cycle breaking done by the registry.

Usage:
    ```python
    from typeschema.registry.filters import SchemaFilter

    class AddOwnerFilter(SchemaFilter):
        def apply(self, schema, registry, type_):
            schema.extensions["x-owner"] = "orders-team"

    config = SchemaConfig().schema_filter(AddOwnerFilter())
    ```
"""

import inspect
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Union

from typeschema.schema.types import Schema

if TYPE_CHECKING:
    from typeschema.registry.registry import SchemaRegistry


class SchemaFilter(ABC):
    """Abstract base class for object-schema post-processors."""

    @abstractmethod
    def apply(self, schema: Schema, registry: "SchemaRegistry", type_: Any) -> None:
        """
        Mutate an object schema in place.

        Args:
            schema: The object schema just built for type_
            registry: The registry building it (for registering auxiliary types)
            type_: The type the schema describes
        """
        pass


FilterLike = Union[SchemaFilter, Callable[[Schema, "SchemaRegistry", Any], None]]


class CallableFilter(SchemaFilter):
    """Adapter turning a plain function into a SchemaFilter."""

    def __init__(self, func: Callable[[Schema, "SchemaRegistry", Any], None]):
        self.func = func

    def apply(self, schema: Schema, registry: "SchemaRegistry", type_: Any) -> None:
        self.func(schema, registry, type_)

    def __repr__(self) -> str:
        return f"CallableFilter({getattr(self.func, '__name__', self.func)!r})"


def as_filter(candidate: FilterLike) -> SchemaFilter:
    """
    Normalize a filter or plain callable to a SchemaFilter.

    Raises:
        TypeError: If candidate is neither
    """
    if isinstance(candidate, SchemaFilter):
        return candidate
    if callable(candidate):
        return CallableFilter(candidate)
    raise TypeError(f"Schema filters must be SchemaFilter instances or callables, got {candidate!r}")


class DocstringDescriptionFilter(SchemaFilter):
    """Use the class docstring as the schema description."""

    def apply(self, schema: Schema, registry: "SchemaRegistry", type_: Any) -> None:
        if schema.description is not None or not isinstance(type_, type):
            return
        # inspect.getdoc falls back to base classes; only the class's own doc counts
        doc = type_.__dict__.get("__doc__")
        if not doc or doc.startswith(f"{type_.__name__}("):
            # Missing, or the signature dataclasses generate when there is none
            return
        schema.description = inspect.cleandoc(doc)


class VendorExtensionFilter(SchemaFilter):
    """
    Attach a fixed vendor extension to every object schema.

    Args:
        name: Extension name; "x-" is prepended when missing
        value: JSON-serializable value
    """

    def __init__(self, name: str, value: Any):
        self.name = name if name.startswith("x-") else f"x-{name}"
        self.value = value

    def apply(self, schema: Schema, registry: "SchemaRegistry", type_: Any) -> None:
        schema.extensions[self.name] = self.value
