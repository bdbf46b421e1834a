"""
Unit tests for the primitive mapping table and Schema rendering.
"""

import ctypes
import datetime
import decimal
import uuid

import pytest
from typeschema.registry import SchemaRegistry
from typeschema.schema import PRIMITIVE_MAPPINGS, Schema, is_primitive


class TestPrimitiveMappings:
    """Test the (type, format) pair produced for every scalar kind."""

    @pytest.mark.parametrize("scalar,expected", [
        (ctypes.c_int16, {"type": "integer", "format": "int32"}),
        (ctypes.c_uint16, {"type": "integer", "format": "int32"}),
        (ctypes.c_int32, {"type": "integer", "format": "int32"}),
        (ctypes.c_uint32, {"type": "integer", "format": "int32"}),
        (ctypes.c_int64, {"type": "integer", "format": "int64"}),
        (ctypes.c_uint64, {"type": "integer", "format": "int64"}),
        (int, {"type": "integer", "format": "int64"}),
        (ctypes.c_float, {"type": "number", "format": "float"}),
        (float, {"type": "number", "format": "double"}),
        (ctypes.c_double, {"type": "number", "format": "double"}),
        (decimal.Decimal, {"type": "number", "format": "double"}),
        (str, {"type": "string"}),
        (ctypes.c_char, {"type": "string"}),
        (bytes, {"type": "string", "format": "byte"}),
        (ctypes.c_byte, {"type": "string", "format": "byte"}),
        (ctypes.c_ubyte, {"type": "string", "format": "byte"}),
        (uuid.UUID, {"type": "string"}),
        (bool, {"type": "boolean"}),
        (datetime.datetime, {"type": "string", "format": "date-time"}),
    ])
    def test_scalar_kind(self, scalar, expected):
        """Test each scalar kind through the registry."""
        schema = SchemaRegistry().find_or_register(scalar)

        assert schema.to_dict() == expected

    def test_factories_return_fresh_nodes(self):
        """Test that mutating one primitive schema never leaks into the next."""
        first = PRIMITIVE_MAPPINGS[str]()
        first.max_length = 10

        second = PRIMITIVE_MAPPINGS[str]()
        assert second.max_length is None
        assert first is not second

    def test_bool_is_not_an_integer(self):
        """Test that bool maps exactly even though it subclasses int."""
        assert PRIMITIVE_MAPPINGS[bool]().type == "boolean"

    def test_is_primitive_tolerates_unhashable(self):
        """Test is_primitive with values that cannot be dict keys."""
        assert is_primitive(int)
        assert not is_primitive(datetime.date)
        assert not is_primitive([int])


class TestSchemaRendering:
    """Test Schema.to_dict() wire form."""

    def test_reference(self):
        """Test rendering a bare reference."""
        schema = Schema(ref="Order")

        assert schema.is_reference
        assert schema.to_dict() == {"$ref": "Order"}

    def test_unset_fields_are_omitted(self):
        """Test that only set attributes appear."""
        assert Schema(type="object").to_dict() == {"type": "object"}

    def test_empty_required_is_omitted(self):
        """Test that an empty required list never reaches the wire."""
        schema = Schema(type="object", properties={}, required=[])

        assert "required" not in schema.to_dict()

    def test_camel_case_keys_and_extensions(self):
        """Test validation keys and vendor extensions."""
        schema = Schema(
            type="object",
            additional_properties=Schema(type="string", min_length=1, max_length=5),
            extensions={"x-owner": "orders"},
        )

        assert schema.to_dict() == {
            "type": "object",
            "additionalProperties": {"type": "string", "minLength": 1, "maxLength": 5},
            "x-owner": "orders",
        }

    def test_children(self):
        """Test that children() visits items, map values and properties."""
        items = Schema(ref="A")
        prop = Schema(ref="B")
        schema = Schema(type="array", items=items)
        obj = Schema(type="object", properties={"b": prop})

        assert list(schema.children()) == [items]
        assert list(obj.children()) == [prop]
