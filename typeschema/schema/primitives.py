"""
Primitive type mappings.

Fixed table from well-known scalar types to their (type, format) pair. The
format strings are part of the wire contract and must not change.

Sized integer and float kinds have no builtin Python spelling, so the ctypes
scalar types stand in for them:

    | Python type                                  | type    | format    |
    |----------------------------------------------|---------|-----------|
    | c_int16, c_uint16, c_int32, c_uint32         | integer | int32     |
    | int, c_int64, c_uint64                       | integer | int64     |
    | c_float                                      | number  | float     |
    | float, Decimal, c_double                     | number  | double    |
    | str, c_char, c_wchar                         | string  |           |
    | bytes, bytearray, c_byte, c_ubyte            | string  | byte      |
    | UUID                                         | string  |           |
    | bool, c_bool                                 | boolean |           |
    | datetime                                     | string  | date-time |
"""

import ctypes
import datetime
import decimal
import uuid
from typing import Callable, Dict, Optional

from typeschema.schema.types import Schema

SchemaFactory = Callable[[], Schema]


def _factory(type_: str, format: Optional[str] = None) -> SchemaFactory:
    """Build a zero-argument factory returning a fresh node on every call."""
    return lambda: Schema(type=type_, format=format)


PRIMITIVE_MAPPINGS: Dict[type, SchemaFactory] = {
    ctypes.c_int16: _factory("integer", "int32"),
    ctypes.c_uint16: _factory("integer", "int32"),
    ctypes.c_int32: _factory("integer", "int32"),
    ctypes.c_uint32: _factory("integer", "int32"),
    int: _factory("integer", "int64"),
    ctypes.c_int64: _factory("integer", "int64"),
    ctypes.c_uint64: _factory("integer", "int64"),
    ctypes.c_float: _factory("number", "float"),
    float: _factory("number", "double"),
    ctypes.c_double: _factory("number", "double"),
    decimal.Decimal: _factory("number", "double"),
    str: _factory("string"),
    ctypes.c_char: _factory("string"),
    ctypes.c_wchar: _factory("string"),
    bytes: _factory("string", "byte"),
    bytearray: _factory("string", "byte"),
    ctypes.c_byte: _factory("string", "byte"),
    ctypes.c_ubyte: _factory("string", "byte"),
    uuid.UUID: _factory("string"),
    bool: _factory("boolean"),
    ctypes.c_bool: _factory("boolean"),
    datetime.datetime: _factory("string", "date-time"),
}


def is_primitive(type_: object) -> bool:
    """Check whether a type has an entry in the primitive table."""
    try:
        return type_ in PRIMITIVE_MAPPINGS
    except TypeError:
        # Unhashable annotation objects are never primitives
        return False
