"""
Schema registry - turns types into schemas and collects named definitions.

This is the entry point of the package. find_or_register() builds the schema
for a root type and, by the time it returns, every complex type reachable from
it (through object members, array items and map values) has an entry in the
definitions table.

Strategy:
    1. Build the root schema. Complex object types referenced from anywhere,
       the root included, become bare references and are queued. So does an
       array or map type met again while its own items are being expanded
       (class Left(List["Right"]), class Right(List["Left"])).
    2. Drain the queue first-in-first-out. Names already in the table are
       skipped; everything else is expanded in full and inserted. Nested
       references found while expanding go back onto the same queue instead
       of being recursed into, so stack depth stays constant however deep or
       cyclic the type graph is.
    3. Qualify every reference in the root schema tree into a pointer
       (ref_prefix + name). References inside definitions stay bare.

Usage:
    ```python
    from typeschema.registry import SchemaRegistry

    registry = SchemaRegistry()
    root = registry.find_or_register(Order)

    root.to_dict()                  # {"$ref": "#/definitions/Order"}
    registry.definitions.to_dict()  # {"Order": {...}, "OrderItem": {...}}
    ```

Threading:
    A registry is not thread-safe. One registry serves one document
    generation pass on one thread; parallel generation needs one registry per
    thread.
"""

import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Iterable, List, Optional, Tuple

from typeschema.contracts.naming import friendly_id
from typeschema.contracts.resolver import ContractResolver, ObjectContract
from typeschema.registry.classifier import (
    DEFAULT_TRANSPORT_TYPES,
    Classification,
    TypeKind,
    classify,
)
from typeschema.registry.definitions import DefinitionsTable
from typeschema.registry.filters import FilterLike, SchemaFilter, as_filter
from typeschema.schema.primitives import SchemaFactory
from typeschema.schema.types import Schema
from typeschema.schema.validation import apply_validation

logger = logging.getLogger(__name__)

DEFAULT_REF_PREFIX = "#/definitions/"

Worklist = Deque[Tuple[str, Any]]


class DefinitionLimitExceeded(RuntimeError):
    """Raised when a registry would hold more definitions than its configured ceiling."""


class SchemaRegistry:
    """
    Owns the definitions table for one generation pass.

    Definitions accumulate across find_or_register() calls on the same
    instance; call reset() or build a new registry for a new pass.

    Attributes:
        definitions: Case-insensitive table of definition name -> Schema
        contract_resolver: Structural classification collaborator
        custom_mappings: Exact type -> schema factory overrides
        schema_filters: Object-schema post-processors, in run order
        transport_types: Types always described as opaque objects
        ref_prefix: Pointer prefix applied to references in root schemas
        max_definitions: Optional ceiling on the definitions table size
    """

    def __init__(
        self,
        contract_resolver: Optional[ContractResolver] = None,
        custom_mappings: Optional[Dict[Any, SchemaFactory]] = None,
        schema_filters: Optional[Iterable[FilterLike]] = None,
        transport_types: Iterable[type] = DEFAULT_TRANSPORT_TYPES,
        ref_prefix: str = DEFAULT_REF_PREFIX,
        max_definitions: Optional[int] = None,
    ):
        self.contract_resolver = contract_resolver or ContractResolver()
        self.custom_mappings: Dict[Any, SchemaFactory] = dict(custom_mappings or {})
        self.schema_filters: List[SchemaFilter] = [as_filter(f) for f in (schema_filters or [])]
        self.transport_types = tuple(transport_types)
        self.ref_prefix = ref_prefix
        self.max_definitions = max_definitions
        self.definitions = DefinitionsTable()
        # Array and map types whose inline expansion is in progress
        self._expanding: List[Any] = []

        self._builders: Dict[TypeKind, Callable[[Classification, bool, Worklist], Schema]] = {
            TypeKind.CUSTOM: self._create_factory_schema,
            TypeKind.PRIMITIVE: self._create_factory_schema,
            TypeKind.NULLABLE: self._create_nullable_schema,
            TypeKind.ENUM: self._create_enum_schema,
            TypeKind.SEQUENCE: self._create_array_schema,
            TypeKind.MAP: self._create_dictionary_schema,
            TypeKind.OBJECT: self._create_object_schema,
            TypeKind.OPAQUE: self._create_opaque_schema,
        }

    def find_or_register(self, type_: Any) -> Schema:
        """
        Build the schema for a root type and register everything it references.

        Args:
            type_: Any type; unknown shapes become opaque objects

        Returns:
            Schema: Root schema; references in it are qualified with ref_prefix

        Raises:
            DefinitionLimitExceeded: If max_definitions is set and would be
                exceeded. Definitions added by this call are removed first, so
                the table is left as it was before the call.

        Example:
            ```python
            registry = SchemaRegistry()
            registry.find_or_register(List[Order]).to_dict()
            # {"type": "array", "items": {"$ref": "#/definitions/Order"}}
            ```
        """
        referenced: Worklist = deque()
        root = self._create_schema(type_, True, referenced)
        added: List[str] = []

        while referenced:
            name, next_type = referenced.popleft()
            if name in self.definitions:
                continue

            if self.max_definitions is not None and len(self.definitions) >= self.max_definitions:
                # Roll back so no definition refers to an unregistered name
                for added_name in added:
                    del self.definitions[added_name]
                raise DefinitionLimitExceeded(
                    f"Registering {name!r} would exceed the limit of {self.max_definitions} definitions"
                )

            self.definitions.add(name, self._create_schema(next_type, False, referenced))
            added.append(name)
            logger.debug(f"Registered definition {name!r} ({len(self.definitions)} total)")

        self._qualify_references(root)
        return root

    def dereference(self, schema: Schema) -> Schema:
        """
        Follow a reference to its definition.

        Accepts bare and qualified references; non-reference schemas are
        returned unchanged.

        Raises:
            KeyError: If the referenced definition is not registered
        """
        if not schema.is_reference:
            return schema
        name = schema.ref
        if name.startswith(self.ref_prefix):
            name = name[len(self.ref_prefix):]
        return self.definitions[name]

    def reset(self) -> None:
        """Start a new generation pass with an empty definitions table."""
        self.definitions = DefinitionsTable()

    def _create_schema(self, type_: Any, ref_if_complex: bool, referenced: Worklist) -> Schema:
        classification = classify(
            type_,
            self.contract_resolver,
            custom_mappings=self.custom_mappings,
            transport_types=self.transport_types,
        )
        return self._builders[classification.kind](classification, ref_if_complex, referenced)

    def _create_ref_schema(self, type_: Any, referenced: Worklist) -> Schema:
        name = friendly_id(type_)
        referenced.append((name, type_))
        logger.debug(f"Queued {name!r} for expansion")
        return Schema(ref=name)

    def _create_factory_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        return classification.factory()

    def _create_nullable_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        return self._create_schema(classification.inner, ref_if_complex, referenced)

    def _create_enum_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        return Schema(type="string", enum=[member.name for member in classification.type])

    def _create_array_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        contract = classification.contract
        if contract.underlying_type in self._expanding:
            # Collection reached again inside its own expansion
            return self._create_ref_schema(contract.underlying_type, referenced)

        self._expanding.append(contract.underlying_type)
        try:
            items = self._create_schema(contract.item_type, True, referenced)
        finally:
            self._expanding.pop()
        return Schema(type="array", items=items)

    def _create_dictionary_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        contract = classification.contract
        if contract.underlying_type in self._expanding:
            return self._create_ref_schema(contract.underlying_type, referenced)

        self._expanding.append(contract.underlying_type)
        try:
            additional_properties = self._create_schema(contract.value_type, True, referenced)
        finally:
            self._expanding.pop()
        return Schema(type="object", additional_properties=additional_properties)

    def _create_object_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        if ref_if_complex:
            return self._create_ref_schema(classification.type, referenced)
        return self._create_complex_schema(classification.contract, referenced)

    def _create_opaque_schema(self, classification: Classification, ref_if_complex: bool, referenced: Worklist) -> Schema:
        # Honour a custom mapping for `object` itself
        factory = self.custom_mappings.get(object)
        if factory is not None:
            return factory()
        return Schema(type="object")

    def _create_complex_schema(self, contract: ObjectContract, referenced: Worklist) -> Schema:
        members = [member for member in contract.members if not member.ignored]

        properties = {
            member.name: apply_validation(
                self._create_schema(member.annotation, True, referenced),
                member.constraints,
            )
            for member in members
        }
        required = [member.name for member in members if member.required]

        schema = Schema(
            type="object",
            properties=properties,
            required=required or None,  # never an empty list
        )

        for schema_filter in self.schema_filters:
            schema_filter.apply(schema, self, contract.underlying_type)

        return schema

    def _qualify_references(self, root: Schema) -> None:
        pending = [root]
        while pending:
            node = pending.pop()
            if node.ref is not None and not node.ref.startswith(self.ref_prefix):
                node.ref = self.ref_prefix + node.ref
            pending.extend(node.children())

    def __repr__(self) -> str:
        return f"SchemaRegistry(definitions={len(self.definitions)}, filters={len(self.schema_filters)})"
