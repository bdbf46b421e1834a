"""
Contract resolution - structural classification of Python types.

The registry never reflects over types itself. It asks a contract resolver
whether a type is array-like, map-like or object-like and, for object-like
types, which members it has. This module provides the default resolver, which
understands:
    - Builtin and abstract collections (list, set, tuple[X, ...], Sequence, ...)
    - Builtin and abstract mappings (dict, Mapping, OrderedDict, ...)
    - Subclasses of parameterized collections (class Nodes(List["Nodes"]))
    - Pydantic models, dataclasses, TypedDicts, NamedTuples
    - Plain classes with annotations

Anything else resolves to None, which the registry treats as an opaque object.

Usage:
    ```python
    from typeschema.contracts import ContractResolver, ObjectContract

    resolver = ContractResolver()
    contract = resolver.resolve(Order)

    if isinstance(contract, ObjectContract):
        for member in contract.members:
            print(member.name, member.annotation, member.required)
    ```

Member policy:
    - ignored: pydantic Field(exclude=True), dataclass field(metadata={"ignore": True})
    - required: pydantic is_required(); TypedDict required keys; otherwise a
      member without a default whose annotation is not Optional
    - ClassVar members and names starting with "_" are skipped entirely
"""

import collections
import collections.abc
import dataclasses
import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Annotated, Any, ClassVar, Dict, ForwardRef, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel
from typing_extensions import NotRequired, Required, is_typeddict

from typeschema.schema.validation import collect_constraints

logger = logging.getLogger(__name__)

# Abstract origins that denote a homogeneous collection when used directly
_ARRAY_ORIGINS = (
    collections.abc.Iterable,
    collections.abc.Collection,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
)

# Concrete collection bases; str/bytes are handled as primitives before this point
_ARRAY_BASES = (list, set, frozenset, tuple, collections.deque, collections.abc.Sequence, collections.abc.Set)
_NOT_ARRAYS = (str, bytes, bytearray, memoryview)

_UNION_TYPES: Tuple[Any, ...] = (Union,)
if hasattr(types, "UnionType"):
    _UNION_TYPES = (Union, types.UnionType)


@dataclass
class Member:
    """
    One named member of an object contract.

    Attributes:
        name: Serialized member name (aliases applied)
        annotation: Declared type with Annotated metadata stripped
        ignored: Member must not appear in the schema
        required: Member is required in serialized form
        constraints: Validation constraints (see schema.validation)
    """

    name: str
    annotation: Any
    ignored: bool = False
    required: bool = False
    constraints: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ArrayContract:
    """Homogeneous ordered collection of item_type."""

    underlying_type: Any
    item_type: Any


@dataclass
class DictionaryContract:
    """String-keyed map with values of value_type."""

    underlying_type: Any
    value_type: Any


@dataclass
class ObjectContract:
    """Named, typed members."""

    underlying_type: Any
    members: List[Member] = field(default_factory=list)


Contract = Union[ArrayContract, DictionaryContract, ObjectContract]


class ContractResolver:
    """
    Default contract resolver.

    Contracts are cached per type, so one resolver can be shared by every
    registry of a generation pass.

    Attributes:
        cache_enabled: Whether resolved contracts are memoized
    """

    def __init__(self, cache_enabled: bool = True):
        self.cache_enabled = cache_enabled
        self._cache: Dict[Any, Optional[Contract]] = {}

    def resolve(self, type_: Any) -> Optional[Contract]:
        """
        Resolve the structural contract of a type.

        Args:
            type_: Class or generic alias

        Returns:
            ArrayContract, DictionaryContract, ObjectContract, or None when the
            type has no usable structure
        """
        if not self.cache_enabled:
            return self._create_contract(type_)

        try:
            if type_ in self._cache:
                return self._cache[type_]
        except TypeError:
            # Unhashable alias (e.g. Annotated with dict metadata)
            return self._create_contract(type_)

        contract = self._create_contract(type_)
        self._cache[type_] = contract
        return contract

    def _create_contract(self, type_: Any) -> Optional[Contract]:
        if type_ is Any or type_ is object:
            return None

        origin = get_origin(type_)
        args = get_args(type_)
        target = origin if origin is not None else type_

        if not isinstance(target, type):
            # Literal, Callable, TypeVar, unresolved forward refs
            return None

        if _is_namedtuple(target) or is_typeddict(target):
            return self._object_contract(type_, target, args)

        if issubclass(target, collections.abc.Mapping):
            return DictionaryContract(type_, self._value_type(type_, target, args))

        if target in _ARRAY_ORIGINS or (
            issubclass(target, _ARRAY_BASES) and not issubclass(target, _NOT_ARRAYS)
        ):
            return ArrayContract(type_, self._item_type(type_, target, args))

        return self._object_contract(type_, target, args)

    def _item_type(self, type_: Any, target: type, args: Tuple[Any, ...]) -> Any:
        if args:
            if issubclass(target, tuple):
                if len(args) == 2 and args[1] is Ellipsis:
                    return args[0]
                # Heterogeneous tuples only collapse when every slot agrees
                return args[0] if all(arg == args[0] for arg in args) else Any
            return args[0]
        base_args = _generic_base_args(target, (list, set, frozenset, tuple) + _ARRAY_ORIGINS)
        return base_args[0] if base_args else Any

    def _value_type(self, type_: Any, target: type, args: Tuple[Any, ...]) -> Any:
        if len(args) == 2:
            return args[1]
        base_args = _generic_base_args(
            target,
            (dict, collections.OrderedDict, collections.defaultdict,
             collections.abc.Mapping, collections.abc.MutableMapping),
        )
        return base_args[1] if len(base_args) == 2 else Any

    def _object_contract(self, type_: Any, target: type, args: Tuple[Any, ...]) -> Optional[ObjectContract]:
        if isinstance(type_, type) and issubclass(type_, BaseModel):
            return ObjectContract(type_, self._pydantic_members(type_))

        if target.__module__ == "builtins" or inspect.isabstract(target):
            return None
        if getattr(target, "_is_protocol", False):
            return None

        typevars = dict(zip(getattr(target, "__parameters__", ()), args))

        if dataclasses.is_dataclass(target):
            members = self._dataclass_members(target)
        elif is_typeddict(target):
            members = self._typeddict_members(target)
        elif _is_namedtuple(target):
            members = self._namedtuple_members(target)
        else:
            members = self._class_members(target)
            if not members:
                return None

        if typevars:
            for member in members:
                member.annotation = _substitute(member.annotation, typevars)

        return ObjectContract(type_, members)

    def _pydantic_members(self, model: type) -> List[Member]:
        if not getattr(model, "__pydantic_complete__", True):
            model.model_rebuild(raise_errors=False)

        members = []
        for name, info in model.model_fields.items():
            # pydantic only lifts a top-level Annotated into info.metadata
            annotation, nested = _split_annotated(info.annotation)
            constraints = collect_constraints(info.metadata)
            constraints.update(nested)
            members.append(Member(
                name=info.serialization_alias or info.alias or name,
                annotation=annotation,
                ignored=info.exclude is True,
                required=info.is_required(),
                constraints=constraints,
            ))
        return members

    def _dataclass_members(self, cls: type) -> List[Member]:
        hints = _type_hints(cls)
        members = []
        for f in dataclasses.fields(cls):
            if f.name.startswith("_"):
                continue
            annotation, constraints = _split_annotated(hints.get(f.name, Any))
            has_default = (
                f.default is not dataclasses.MISSING
                or f.default_factory is not dataclasses.MISSING
            )
            members.append(Member(
                name=f.name,
                annotation=annotation,
                ignored=bool(f.metadata.get("ignore", False)),
                required=not has_default and not _is_optional(annotation),
                constraints=constraints,
            ))
        return members

    def _typeddict_members(self, cls: type) -> List[Member]:
        required_keys = getattr(cls, "__required_keys__", frozenset())
        members = []
        for name, hint in _type_hints(cls).items():
            if get_origin(hint) in (Required, NotRequired):
                hint = get_args(hint)[0]
            annotation, constraints = _split_annotated(hint)
            members.append(Member(
                name=name,
                annotation=annotation,
                required=name in required_keys,
                constraints=constraints,
            ))
        return members

    def _namedtuple_members(self, cls: type) -> List[Member]:
        hints = _type_hints(cls)
        defaults = getattr(cls, "_field_defaults", {})
        members = []
        for name in cls._fields:
            annotation, constraints = _split_annotated(hints.get(name, Any))
            members.append(Member(
                name=name,
                annotation=annotation,
                required=name not in defaults and not _is_optional(annotation),
                constraints=constraints,
            ))
        return members

    def _class_members(self, cls: type) -> List[Member]:
        members = []
        for name, hint in _type_hints(cls).items():
            if name.startswith("_") or get_origin(hint) is ClassVar or hint is ClassVar:
                continue
            annotation, constraints = _split_annotated(hint)
            members.append(Member(
                name=name,
                annotation=annotation,
                required=not hasattr(cls, name) and not _is_optional(annotation),
                constraints=constraints,
            ))
        return members


def _type_hints(cls: type) -> Dict[str, Any]:
    """Resolved annotations, falling back to raw ones when forward refs fail."""
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.warning(f"Could not resolve annotations of {cls!r}: {e}")
        hints: Dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(getattr(klass, "__annotations__", {}))
        return hints


def _split_annotated(hint: Any) -> Tuple[Any, Dict[str, Any]]:
    """
    Strip Annotated[...] and collect its constraint metadata.

    Optional[Annotated[X, ...]] keeps its Optional wrapper and still yields the
    constraints of X.
    """
    if get_origin(hint) is Annotated:
        inner, *metadata = get_args(hint)
        return inner, collect_constraints(metadata)

    if _is_optional(hint):
        args = get_args(hint)
        if any(get_origin(arg) is Annotated for arg in args):
            stripped, constraints = [], {}
            for arg in args:
                inner, arg_constraints = _split_annotated(arg)
                stripped.append(inner)
                constraints.update(arg_constraints)
            return Union[tuple(stripped)], constraints

    return hint, {}


def _is_optional(annotation: Any) -> bool:
    return get_origin(annotation) in _UNION_TYPES and type(None) in get_args(annotation)


def _is_namedtuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _generic_base_args(cls: type, origins: Tuple[Any, ...]) -> Tuple[Any, ...]:
    """
    Find the type arguments a class passed to a parameterized collection base.

    `class Nodes(List["Nodes"])` yields (Nodes,) and
    `class Tree(Dict[str, List["Tree"]])` yields (str, List[Tree]); forward
    references are resolved at any depth in the defining module with the
    class itself in scope.
    """
    for klass in cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            if get_origin(base) in origins:
                return tuple(_resolve_forward_refs(arg, klass) for arg in get_args(base))
    return ()


def _resolve_forward_refs(arg: Any, owner: type) -> Any:
    """Resolve every forward reference inside a type argument of owner's base."""
    if isinstance(arg, ForwardRef):
        arg = arg.__forward_arg__

    # get_type_hints does the recursive evaluation; a throwaway class carries
    # the argument as its only annotation in the owner's module
    shim = type(f"{owner.__name__}Base", (), {"__annotations__": {"arg": arg}, "__module__": owner.__module__})
    try:
        return typing.get_type_hints(shim, localns={owner.__name__: owner}, include_extras=True)["arg"]
    except (NameError, SyntaxError, TypeError) as e:
        logger.warning(f"Could not resolve {arg!r} in {owner!r}: {e}")
        return Any


def _substitute(annotation: Any, typevars: Dict[Any, Any]) -> Any:
    """Replace TypeVars of a generic class with the arguments it was closed over."""
    if isinstance(annotation, typing.TypeVar):
        return typevars.get(annotation, annotation)

    origin = get_origin(annotation)
    args = get_args(annotation)
    if origin is None or not args:
        return annotation

    new_args = tuple(_substitute(arg, typevars) for arg in args)
    if new_args == args:
        return annotation
    if origin in _UNION_TYPES:
        return Union[new_args]
    try:
        return origin[new_args]
    except TypeError:
        logger.debug(f"Cannot re-parameterize {annotation!r}; keeping it unsubstituted")
        return annotation
