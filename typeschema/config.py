"""
Registry configuration.

SchemaConfig collects everything a registry needs (custom type mappings,
schema filters, transport types, resolver, pointer prefix, size ceiling) and
builds fresh registries from it, one per generation pass.

Scalar options live in a pydantic model so bad values fail at assignment
time rather than halfway through a generation pass.

Usage:
    ```python
    from typeschema.config import SchemaConfig
    from typeschema.schema import Schema

    config = SchemaConfig.customize(lambda c: (
        c.map_type(Money, lambda: Schema(type="string", format="decimal"))
         .schema_filter(VendorExtensionFilter("x-team", "orders"))
         .ref_prefix("#/components/schemas/")
    ))

    registry = config.create_registry()
    ```
"""

import copy
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from typeschema.contracts.resolver import ContractResolver
from typeschema.registry.classifier import DEFAULT_TRANSPORT_TYPES
from typeschema.registry.filters import FilterLike, SchemaFilter, as_filter
from typeschema.registry.registry import DEFAULT_REF_PREFIX, SchemaRegistry
from typeschema.schema.primitives import SchemaFactory
from typeschema.schema.types import Schema

logger = logging.getLogger(__name__)


class RegistrySettings(BaseModel):
    """
    Scalar registry options.

    Attributes:
        ref_prefix: Pointer prefix for references in root schemas
        max_definitions: Ceiling on definitions per registry (None = unlimited)
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    ref_prefix: str = Field(default=DEFAULT_REF_PREFIX, min_length=1)
    max_definitions: Optional[int] = Field(default=None, gt=0)


class SchemaConfig:
    """
    Fluent builder for SchemaRegistry instances.

    Every mutator returns the config itself so calls can be chained.
    """

    def __init__(self, settings: Optional[RegistrySettings] = None):
        self.settings = settings or RegistrySettings()
        self.custom_mappings: Dict[Any, SchemaFactory] = {}
        self.schema_filters: List[SchemaFilter] = []
        self.transport_types: List[type] = list(DEFAULT_TRANSPORT_TYPES)
        self.resolver: Optional[ContractResolver] = None

    @classmethod
    def customize(cls, configure: Callable[["SchemaConfig"], Any]) -> "SchemaConfig":
        """Create a config and hand it to a customization callback."""
        config = cls()
        configure(config)
        return config

    def map_type(self, type_: Any, factory: Union[SchemaFactory, Schema]) -> "SchemaConfig":
        """
        Override the schema of one exact type.

        Args:
            type_: Type to override; matched by identity, before anything else
            factory: Zero-argument callable returning a Schema, or a Schema to copy

        Returns:
            SchemaConfig: self
        """
        if isinstance(factory, Schema):
            template = factory
            factory = lambda: copy.deepcopy(template)  # noqa: E731
        elif not callable(factory):
            raise TypeError(f"Mapping for {type_!r} must be a Schema or a zero-argument callable")

        self.custom_mappings[type_] = factory
        logger.debug(f"Custom schema mapping registered for {type_!r}")
        return self

    def schema_filter(self, schema_filter: FilterLike) -> "SchemaConfig":
        """Append a filter; filters run in the order they are added."""
        self.schema_filters.append(as_filter(schema_filter))
        return self

    def transport_type(self, type_: type) -> "SchemaConfig":
        """Treat a type (and its subclasses) as an opaque transport carrier."""
        if type_ not in self.transport_types:
            self.transport_types.append(type_)
        return self

    def ref_prefix(self, prefix: str) -> "SchemaConfig":
        """Set the pointer prefix used for references in root schemas."""
        self.settings.ref_prefix = prefix
        return self

    def max_definitions(self, limit: Optional[int]) -> "SchemaConfig":
        """Set a ceiling on definitions per registry (None to remove it)."""
        self.settings.max_definitions = limit
        return self

    def contract_resolver(self, resolver: ContractResolver) -> "SchemaConfig":
        """Replace the default contract resolver."""
        self.resolver = resolver
        return self

    def create_registry(self) -> SchemaRegistry:
        """
        Build a new registry from the current configuration.

        Returns:
            SchemaRegistry: Fresh registry with an empty definitions table
        """
        return SchemaRegistry(
            contract_resolver=self.resolver or ContractResolver(),
            custom_mappings=self.custom_mappings,
            schema_filters=self.schema_filters,
            transport_types=self.transport_types,
            ref_prefix=self.settings.ref_prefix,
            max_definitions=self.settings.max_definitions,
        )
