"""
Definition naming.

Definition names are derived deterministically from type identity. A name is
unique per closed generic instantiation and never contains "#" or "/", so the
document assembler can turn it into a pointer unambiguously.

Examples:
    Order                  -> "Order"
    Outer.Inner            -> "Outer.Inner"
    Page[Order]            -> "Page[Order]"
    Box[List[Order]]       -> "Box[list[Order]]"
"""

import re
from typing import Any, ForwardRef, get_args, get_origin

# "make_page.<locals>." style prefixes of classes defined inside functions
_LOCALS_PREFIX = re.compile(r"[\w.]*<locals>\.")


def friendly_id(type_: Any) -> str:
    """
    Build the definition name for a type.

    Args:
        type_: A class, generic alias or forward reference

    Returns:
        str: Name used as the definitions table key
    """
    origin = get_origin(type_)
    if origin is not None:
        args = ",".join(friendly_id(arg) for arg in get_args(type_))
        return f"{friendly_id(origin)}[{args}]"

    if isinstance(type_, ForwardRef):
        return type_.__forward_arg__
    if isinstance(type_, str):
        return type_
    if type_ is type(None):
        return "None"
    if type_ is Ellipsis:
        return "..."

    name = getattr(type_, "__name__", None)
    if name is None:
        return _sanitize(repr(type_))

    if "[" in name:
        # Parametrized pydantic models already carry their closed form
        return _sanitize(_LOCALS_PREFIX.sub("", name))

    return _sanitize(_LOCALS_PREFIX.sub("", getattr(type_, "__qualname__", name)))


def _sanitize(name: str) -> str:
    return name.replace("typing.", "").replace("#", "").replace("/", ".")
