"""
Type classifier - one tagged classification per type.

The registry never branches on type shape itself. It asks classify() for a
Classification and dispatches on its kind through a single table. The
dispatch order below is the whole contract; first match wins:

    | order | kind      | matches                                           |
    |-------|-----------|---------------------------------------------------|
    | 1     | CUSTOM    | type has a caller-supplied schema factory         |
    | 2     | PRIMITIVE | type is in PRIMITIVE_MAPPINGS                     |
    | 3     | NULLABLE  | Optional[X] / Union[X, None] / Annotated[X, ...]  |
    | 4     | ENUM      | enum.Enum subclass                                |
    | 5     | SEQUENCE  | resolver returns an ArrayContract                 |
    | 6     | MAP       | resolver returns a DictionaryContract             |
    | 7     | OBJECT    | resolver returns an ObjectContract (not transport)|
    | 8     | OPAQUE    | anything else                                     |

Custom and primitive mappings pre-empt structural reflection, and nullable
unwrapping happens before the enum/object checks.
"""

import enum
import http.client
import http.server
import logging
import types
import urllib.request
from dataclasses import dataclass
from typing import Annotated, Any, Callable, Dict, Iterable, Optional, Tuple, Union, get_args, get_origin

from typeschema.contracts.resolver import (
    ArrayContract,
    Contract,
    ContractResolver,
    DictionaryContract,
    ObjectContract,
)
from typeschema.schema.primitives import PRIMITIVE_MAPPINGS, SchemaFactory

logger = logging.getLogger(__name__)

# Raw request/response carriers; never described structurally
DEFAULT_TRANSPORT_TYPES: Tuple[type, ...] = (
    http.client.HTTPResponse,
    urllib.request.Request,
    http.server.BaseHTTPRequestHandler,
)

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES = (Union, types.UnionType)


class TypeKind(str, enum.Enum):
    """Classification tags, in dispatch order."""

    CUSTOM = "custom"
    PRIMITIVE = "primitive"
    NULLABLE = "nullable"
    ENUM = "enum"
    SEQUENCE = "sequence"
    MAP = "map"
    OBJECT = "object"
    OPAQUE = "opaque"


@dataclass
class Classification:
    """
    Result of classifying one type.

    Attributes:
        kind: Which builder handles the type
        type: The classified type
        factory: Schema factory for CUSTOM and PRIMITIVE
        inner: Unwrapped type for NULLABLE
        contract: Resolved contract for SEQUENCE, MAP and OBJECT
    """

    kind: TypeKind
    type: Any
    factory: Optional[SchemaFactory] = None
    inner: Any = None
    contract: Optional[Contract] = None


def classify(
    type_: Any,
    resolver: ContractResolver,
    custom_mappings: Optional[Dict[Any, SchemaFactory]] = None,
    transport_types: Iterable[type] = DEFAULT_TRANSPORT_TYPES,
) -> Classification:
    """
    Classify a type for schema building.

    Args:
        type_: Any class, generic alias or typing construct
        resolver: Contract resolver used for structural checks
        custom_mappings: Exact type -> schema factory overrides
        transport_types: Types always treated as opaque

    Returns:
        Classification: Tagged result; never raises for unknown shapes

    Example:
        ```python
        classify(Optional[int], ContractResolver()).kind
        # TypeKind.NULLABLE

        classify(List[Order], ContractResolver()).contract.item_type
        # Order
        ```
    """
    factory = _lookup(custom_mappings or {}, type_)
    if factory is not None:
        return Classification(TypeKind.CUSTOM, type_, factory=factory)

    factory = _lookup(PRIMITIVE_MAPPINGS, type_)
    if factory is not None:
        return Classification(TypeKind.PRIMITIVE, type_, factory=factory)

    inner = _unwrap_nullable(type_)
    if inner is not None:
        return Classification(TypeKind.NULLABLE, type_, inner=inner)

    if isinstance(type_, type) and issubclass(type_, enum.Enum):
        return Classification(TypeKind.ENUM, type_)

    contract = resolver.resolve(type_)

    if isinstance(contract, ArrayContract):
        return Classification(TypeKind.SEQUENCE, type_, contract=contract)

    if isinstance(contract, DictionaryContract):
        return Classification(TypeKind.MAP, type_, contract=contract)

    if isinstance(contract, ObjectContract) and not _is_transport(type_, transport_types):
        return Classification(TypeKind.OBJECT, type_, contract=contract)

    logger.debug(f"No structural contract for {type_!r}; describing it as an opaque object")
    return Classification(TypeKind.OPAQUE, type_)


def _lookup(mappings: Dict[Any, Callable], type_: Any) -> Optional[Callable]:
    try:
        return mappings.get(type_)
    except TypeError:
        return None


def _unwrap_nullable(type_: Any) -> Any:
    """Return the inner type of Optional[X] or Annotated[X, ...], else None."""
    origin = get_origin(type_)
    if origin is Annotated:
        return get_args(type_)[0]
    if origin in _UNION_TYPES:
        args = [arg for arg in get_args(type_) if arg is not type(None)]
        if len(args) == 1 and len(args) < len(get_args(type_)):
            return args[0]
    return None


def _is_transport(type_: Any, transport_types: Iterable[type]) -> bool:
    target = get_origin(type_) or type_
    return isinstance(target, type) and issubclass(target, tuple(transport_types))
