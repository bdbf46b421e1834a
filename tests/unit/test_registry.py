"""
Unit tests for the schema registry.
"""

import enum
import http.client
import json
from dataclasses import dataclass, make_dataclass
from typing import Annotated, Dict, List, Optional

import pytest
from annotated_types import MaxLen, MinLen
from pydantic import BaseModel, Field, StringConstraints
from typeschema.registry import DefinitionLimitExceeded, SchemaRegistry
from typeschema.schema import Schema


class Status(enum.Enum):
    PENDING = 1
    SHIPPED = 2
    DELIVERED = 3
    SENT = 2  # alias of SHIPPED


@dataclass
class Node:
    value: int
    next: Optional["Node"] = None


@dataclass
class Husband:
    name: str
    wife: Optional["Wife"] = None


@dataclass
class Wife:
    name: str
    husband: Optional[Husband] = None


@dataclass
class Flags:
    verbose: Optional[bool] = None
    level: int = 0


@dataclass
class Shipment:
    code: Annotated[str, StringConstraints(max_length=8, pattern=r"^[A-Z]+$")]
    status: Status
    lines: Annotated[List[str], MinLen(1)]
    raw: Optional[http.client.HTTPResponse] = None


class Category(List["Category"]):
    pass


class Left(List["Right"]):
    pass


class Right(List["Left"]):
    pass


class Forest(Dict[str, List["Forest"]]):
    pass


@dataclass
class Profile:
    handle: str
    nickname: Optional[Annotated[str, MaxLen(3)]] = None


class Account(BaseModel):
    owner: str = Field(min_length=1)
    balance: float = Field(gt=0, lt=1_000_000)
    tags: Dict[str, str] = {}


class Money:
    amount: int
    currency: str


@dataclass
class Invoice:
    total: Money
    paid: bool


def dumps(registry, root):
    return json.dumps({"root": root.to_dict(), "definitions": registry.definitions.to_dict()})


class TestFindOrRegister:
    """Test root handling and the worklist drain."""

    def test_primitive_root_registers_nothing(self):
        """Test that scalar roots produce no definitions."""
        registry = SchemaRegistry()

        assert registry.find_or_register(str).to_dict() == {"type": "string"}
        assert len(registry.definitions) == 0

    def test_object_root_is_a_qualified_reference(self):
        """Test that a complex root is returned as a pointer to its definition."""
        registry = SchemaRegistry()

        root = registry.find_or_register(Flags)

        assert root.to_dict() == {"$ref": "#/definitions/Flags"}
        assert registry.dereference(root).type == "object"

    def test_idempotence(self):
        """Test that fresh registries give byte-identical output."""
        first = SchemaRegistry()
        second = SchemaRegistry()

        assert dumps(first, first.find_or_register(Husband)) == dumps(second, second.find_or_register(Husband))

    def test_cycle_terminates(self):
        """Test a type with a member of its own type."""
        registry = SchemaRegistry()

        registry.find_or_register(Node)

        assert list(registry.definitions) == ["Node"]
        assert registry.definitions["Node"].properties["next"].to_dict() == {"$ref": "Node"}

    def test_mutual_recursion(self):
        """Test two types referencing each other."""
        registry = SchemaRegistry()

        registry.find_or_register(Husband)

        assert list(registry.definitions) == ["Husband", "Wife"]
        assert registry.definitions["Husband"].properties["wife"].ref == "Wife"
        assert registry.definitions["Wife"].properties["husband"].ref == "Husband"

    def test_deep_chain_does_not_recurse(self):
        """Test a long chain of distinct types against the recursion limit."""
        previous = int
        for i in range(3000):
            previous = make_dataclass(f"Link{i}", [("next", previous)])

        registry = SchemaRegistry()
        registry.find_or_register(previous)

        assert len(registry.definitions) == 3000

    def test_definitions_accumulate_across_roots(self):
        """Test that one registry collects definitions from several calls."""
        registry = SchemaRegistry()

        registry.find_or_register(Flags)
        registry.find_or_register(Node)

        assert list(registry.definitions) == ["Flags", "Node"]

        registry.reset()
        assert len(registry.definitions) == 0


class TestRequired:
    """Test the required list contract."""

    def test_no_required_members_gives_none(self):
        """Test that an empty required set is None, never an empty list."""
        registry = SchemaRegistry()
        registry.find_or_register(Flags)

        assert registry.definitions["Flags"].required is None
        assert "required" not in registry.definitions["Flags"].to_dict()

    def test_required_members_in_declaration_order(self):
        """Test that required names keep member order."""
        registry = SchemaRegistry()
        registry.find_or_register(Shipment)

        assert registry.definitions["Shipment"].required == ["code", "status", "lines"]


class TestSchemaShapes:
    """Test enum, collection, map and opaque schemas."""

    def test_enum_uses_names_in_declaration_order(self):
        """Test that enums emit symbolic names, not values, without aliases."""
        schema = SchemaRegistry().find_or_register(Status)

        assert schema.to_dict() == {"type": "string", "enum": ["PENDING", "SHIPPED", "DELIVERED"]}

    def test_self_referential_collection(self):
        """Test that a list of itself is described through a reference."""
        registry = SchemaRegistry()

        root = registry.find_or_register(Category)

        assert root.to_dict() == {"type": "array", "items": {"$ref": "#/definitions/Category"}}
        assert registry.definitions["Category"].to_dict() == {"type": "array", "items": {"$ref": "Category"}}

    def test_mutually_recursive_collections(self):
        """Test two list types containing each other."""
        registry = SchemaRegistry()

        root = registry.find_or_register(Left)

        assert root.to_dict() == {
            "type": "array",
            "items": {"type": "array", "items": {"$ref": "#/definitions/Left"}},
        }
        assert list(registry.definitions) == ["Left"]
        assert registry.definitions["Left"].items.items.ref == "Left"

    def test_map_of_lists_of_itself(self):
        """Test a map whose values are lists of the map type."""
        registry = SchemaRegistry()

        root = registry.find_or_register(Forest)

        assert root.to_dict() == {
            "type": "object",
            "additionalProperties": {"type": "array", "items": {"$ref": "#/definitions/Forest"}},
        }
        assert registry.definitions["Forest"].additional_properties.items.ref == "Forest"

    def test_map_schema(self):
        """Test string-keyed maps."""
        schema = SchemaRegistry().find_or_register(Dict[str, int])

        assert schema.to_dict() == {
            "type": "object",
            "additionalProperties": {"type": "integer", "format": "int64"},
        }

    def test_nested_root_references_are_all_qualified(self):
        """Test the root fix-up at every nesting level."""
        registry = SchemaRegistry()

        root = registry.find_or_register(Dict[str, List[List[Node]]])

        assert root.to_dict() == {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {"type": "array", "items": {"$ref": "#/definitions/Node"}},
            },
        }
        assert registry.definitions["Node"].properties["next"].ref == "Node"

    def test_custom_ref_prefix(self):
        """Test an OpenAPI 3 style pointer prefix."""
        registry = SchemaRegistry(ref_prefix="#/components/schemas/")

        assert registry.find_or_register(List[Node]).items.ref == "#/components/schemas/Node"

    def test_transport_member_is_opaque(self):
        """Test that raw HTTP carriers are never expanded."""
        registry = SchemaRegistry()
        registry.find_or_register(Shipment)

        assert registry.definitions["Shipment"].properties["raw"].to_dict() == {"type": "object"}
        assert "HTTPResponse" not in registry.definitions


class TestValidationAnnotations:
    """Test member constraints copied onto member schemas."""

    def test_dataclass_annotated_constraints(self):
        """Test Annotated metadata on dataclass members."""
        registry = SchemaRegistry()
        registry.find_or_register(Shipment)
        properties = registry.definitions["Shipment"].properties

        assert properties["code"].to_dict() == {"type": "string", "maxLength": 8, "pattern": "^[A-Z]+$"}
        assert properties["lines"].to_dict() == {"type": "array", "items": {"type": "string"}, "minItems": 1}

    def test_optional_member_constraints(self):
        """Test Annotated constraints wrapped in Optional."""
        registry = SchemaRegistry()
        registry.find_or_register(Profile)

        assert registry.definitions["Profile"].properties["nickname"].to_dict() == {"type": "string", "maxLength": 3}
        assert registry.definitions["Profile"].required == ["handle"]

    def test_pydantic_field_constraints(self):
        """Test pydantic Field constraints, including strict bounds."""
        registry = SchemaRegistry()
        registry.find_or_register(Account)
        properties = registry.definitions["Account"].properties

        assert properties["owner"].min_length == 1
        assert properties["balance"].to_dict() == {
            "type": "number",
            "format": "double",
            "minimum": 0,
            "exclusiveMinimum": True,
            "maximum": 1_000_000,
            "exclusiveMaximum": True,
        }
        assert registry.definitions["Account"].required == ["owner", "balance"]


class TestCustomMappings:
    """Test caller-supplied schema overrides."""

    def test_custom_mapping_replaces_object_expansion(self):
        """Test that a mapped type is inlined and never registered."""
        registry = SchemaRegistry(custom_mappings={Money: lambda: Schema(type="string", format="decimal")})

        registry.find_or_register(Invoice)

        assert registry.definitions["Invoice"].properties["total"].to_dict() == {"type": "string", "format": "decimal"}
        assert "Money" not in registry.definitions

    def test_object_mapping_applies_to_opaque_types(self):
        """Test that mapping `object` changes the opaque fallback."""
        registry = SchemaRegistry(custom_mappings={object: lambda: Schema(type="object", extensions={"x-any": True})})

        schema = registry.find_or_register(Optional[http.client.HTTPResponse])

        assert schema.to_dict() == {"type": "object", "x-any": True}

    def test_factory_errors_propagate(self):
        """Test that collaborator errors reach the caller unchanged."""
        def broken():
            raise LookupError("no schema for Money")

        registry = SchemaRegistry(custom_mappings={Money: broken})

        with pytest.raises(LookupError, match="no schema for Money"):
            registry.find_or_register(Invoice)


class TestDefinitionLimit:
    """Test the optional definitions ceiling."""

    def test_limit_exceeded(self):
        """Test that the ceiling stops a drain that would exceed it."""
        registry = SchemaRegistry(max_definitions=1)

        with pytest.raises(DefinitionLimitExceeded, match="limit of 1"):
            registry.find_or_register(Husband)

    def test_limit_not_reached(self):
        """Test that graphs within the ceiling are unaffected."""
        registry = SchemaRegistry(max_definitions=2)

        registry.find_or_register(Husband)

        assert len(registry.definitions) == 2

    def test_limit_leaves_table_unchanged(self):
        """Test that a failed call removes the definitions it added."""
        registry = SchemaRegistry(max_definitions=2)
        registry.find_or_register(Flags)

        with pytest.raises(DefinitionLimitExceeded):
            registry.find_or_register(Husband)

        assert list(registry.definitions) == ["Flags"]


class TestCaseInsensitiveNames:
    """Test names that differ only by case."""

    def test_first_spelling_wins(self):
        """Test that the second type reuses the first definition."""
        upper = make_dataclass("Item", [("a", int)])
        lower = make_dataclass("item", [("b", str)])
        holder = make_dataclass("Holder", [("first", upper), ("second", lower)])

        registry = SchemaRegistry()
        registry.find_or_register(holder)

        assert list(registry.definitions) == ["Holder", "Item"]
        assert registry.definitions["item"].properties.keys() == {"a"}
        assert registry.definitions["Holder"].properties["second"].ref == "item"
