"""Classify Python annotations into binding kinds and build zero values."""
from __future__ import annotations

import collections.abc
import dataclasses
import enum
import inspect
import types
import typing as t

# Marker for parameters that must bind as unsigned integers.
UInt = t.NewType("UInt", int)


class Kind(enum.Enum):
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    SLICE = "slice"
    STRUCT = "struct"
    POINTER = "pointer"
    MAPPING = "mapping"


_LIST_ORIGINS = {
    list,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Collection,
    collections.abc.Iterable,
}
_SET_ORIGINS = {set, collections.abc.Set, collections.abc.MutableSet}
_SLICE_ORIGINS = _LIST_ORIGINS | _SET_ORIGINS | {tuple, frozenset}
_MAPPING_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}


def resolve(tp: t.Any) -> t.Any:
    """Strip Annotated[...] and user NewTypes (UInt is kept)."""
    while True:
        if t.get_origin(tp) is t.Annotated:
            tp = t.get_args(tp)[0]
            continue
        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None and tp is not UInt:
            tp = supertype
            continue
        return tp


def optional_of(tp: t.Any) -> t.Any | None:
    """Return T for Optional[T] / T | None, else None."""
    tp = resolve(tp)
    origin = t.get_origin(tp)
    if origin is t.Union or origin is types.UnionType:
        args = t.get_args(tp)
        rest = [a for a in args if a is not type(None)]
        if len(args) == 2 and len(rest) == 1:
            return rest[0]
    return None


def kind_of(tp: t.Any) -> Kind | None:
    tp = resolve(tp)
    if tp is UInt:
        return Kind.UINT
    if tp is inspect.Parameter.empty or tp is t.Any:
        return Kind.STRING
    if optional_of(tp) is not None:
        return Kind.POINTER

    origin = t.get_origin(tp)
    if origin is not None:
        if origin in _SLICE_ORIGINS:
            return Kind.SLICE
        if origin in _MAPPING_ORIGINS:
            return Kind.MAPPING
        return None

    if not inspect.isclass(tp):
        return None
    if tp in _SLICE_ORIGINS:
        return Kind.SLICE
    if tp in _MAPPING_ORIGINS:
        return Kind.MAPPING
    if dataclasses.is_dataclass(tp):
        return Kind.STRUCT
    # bool before int: bool is an int subclass
    if issubclass(tp, bool):
        return Kind.BOOL
    if issubclass(tp, int):
        return Kind.INT
    if issubclass(tp, float):
        return Kind.FLOAT
    if issubclass(tp, str):
        return Kind.STRING
    return None


def element_type(tp: t.Any) -> t.Any:
    """Element type of a slice annotation or pointee of an optional one."""
    pointee = optional_of(tp)
    if pointee is not None:
        return pointee
    args = [a for a in t.get_args(resolve(tp)) if a is not Ellipsis]
    return args[0] if args else str


def container_of(tp: t.Any) -> type:
    """Concrete collection class used to build a bound slice."""
    tp = resolve(tp)
    origin = t.get_origin(tp) or tp
    if origin in (tuple, frozenset):
        return origin
    if origin in _SET_ORIGINS:
        return set
    return list


def field_types(cls: type) -> dict[str, t.Any]:
    """Resolved field annotations; unresolvable forward references raise NameError."""
    hints = t.get_type_hints(cls, include_extras=True)
    return {f.name: hints.get(f.name, f.type) for f in dataclasses.fields(cls)}


def struct_defaults(cls: type) -> dict[str, t.Any]:
    """Constructor kwargs for a dataclass: declared defaults, else zero values."""
    types_ = field_types(cls)
    kwargs: dict[str, t.Any] = {}
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        if f.default is not dataclasses.MISSING:
            kwargs[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            kwargs[f.name] = f.default_factory()
        else:
            kwargs[f.name] = zero_value(types_[f.name])
    return kwargs


def zero_value(tp: t.Any) -> t.Any:
    kind = kind_of(tp)
    if kind in (Kind.INT, Kind.UINT):
        return 0
    if kind is Kind.FLOAT:
        return 0.0
    if kind is Kind.BOOL:
        return False
    if kind is Kind.STRING:
        return ""
    if kind is Kind.SLICE:
        return container_of(tp)()
    if kind is Kind.MAPPING:
        return {}
    if kind is Kind.STRUCT:
        cls = resolve(tp)
        return cls(**struct_defaults(cls))
    return None
