"""Converter lookup: exact-type and kind tables, and the process-wide default registry."""
from __future__ import annotations

import threading
import typing as t
from dataclasses import dataclass

from binder.attributes import StructAttributeRegistry
from binder.config import Settings, get_settings
from binder.kinds import Kind, kind_of, resolve as resolve_type, zero_value
from binder.values import RequestValues


class Bound(t.NamedTuple):
    """A converted value; absent is True when no usable input was found."""

    value: t.Any
    absent: bool


Converter = t.Callable[["BindContext", str, t.Any], Bound]


@dataclass(frozen=True)
class BindContext:
    """What a converter sees: the registry to recurse through and the request values."""

    registry: "BinderRegistry"
    values: RequestValues

    @property
    def request(self) -> t.Any:
        return self.values.request

    @property
    def settings(self) -> Settings:
        return self.registry.settings

    def get(self, name: str) -> str:
        return self.values.get(name)

    def bind(self, name: str, tp: t.Any) -> Bound:
        return self.registry.bind(self.values, name, tp)

    def with_value(self, name: str, value: str) -> "BindContext":
        return BindContext(self.registry, self.values.with_value(name, value))


class BinderRegistry:
    """
    Two-level converter lookup: exact types first, then kinds.

    Tables are replaced wholesale under a lock on every registration, so
    readers always see a complete dict without locking.
    """

    def __init__(self, settings: Settings | None = None, *, install_defaults: bool = True) -> None:
        self.settings = settings or get_settings()
        self.struct_attributes = StructAttributeRegistry()
        self._lock = threading.Lock()
        self._type_binders: dict[t.Any, Converter] = {}
        self._kind_binders: dict[Kind, Converter] = {}
        if install_defaults:
            self._install_defaults()

    def _install_defaults(self) -> None:
        from binder import converters

        with self._lock:
            self._kind_binders = dict(converters.KIND_BINDERS)
            self._type_binders = dict(converters.type_binders())

    def register(self, sample: t.Any, converter: Converter) -> None:
        """Register converter for the runtime type of sample."""
        self.register_type(type(sample), converter)

    def register_type(self, tp: t.Any, converter: Converter) -> None:
        with self._lock:
            table = dict(self._type_binders)
            table[tp] = converter
            self._type_binders = table

    def register_kind(self, kind: Kind, converter: Converter) -> None:
        with self._lock:
            table = dict(self._kind_binders)
            table[kind] = converter
            self._kind_binders = table

    def resolve(self, tp: t.Any) -> Converter | None:
        try:
            binder = self._type_binders.get(tp)
        except TypeError:
            # unhashable annotation
            binder = None
        if binder is None and resolve_type(tp) is not tp:
            binder = self._type_binders.get(resolve_type(tp))
        if binder is not None:
            return binder
        kind = kind_of(tp)
        if kind is None:
            return None
        return self._kind_binders.get(kind)

    def bind(self, values: RequestValues, name: str, tp: t.Any) -> Bound:
        """Construct a value of type tp from the value named name."""
        binder = self.resolve(tp)
        if binder is None:
            return Bound(zero_value(tp), True)
        return binder(BindContext(self, values), name, tp)

    def bound_value(self, values: RequestValues, name: str, tp: t.Any) -> t.Any:
        """Like bind() but returns only the value (zero value on any failure)."""
        return self.bind(values, name, tp).value

    def reset(self) -> None:
        """Drop custom registrations and cached struct attributes."""
        self.struct_attributes.clear()
        self._install_defaults()


default_registry = BinderRegistry()


def register(sample: t.Any, converter: Converter) -> None:
    default_registry.register(sample, converter)


def register_type(tp: t.Any, converter: Converter) -> None:
    default_registry.register_type(tp, converter)


def register_kind(kind: Kind, converter: Converter) -> None:
    default_registry.register_kind(kind, converter)
