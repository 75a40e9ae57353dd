"""Which dataclass fields bind from which request parameter."""
from __future__ import annotations

import dataclasses
import threading
import typing as t

from binder.kinds import Kind, field_types, kind_of, optional_of, resolve

# Field metadata key holding the source parameter name
TAG = "binder"
# Attribute name meaning "bind from the whole value set"
WILDCARD = "*"

# field name -> source param name
StructAttributes = t.Dict[str, str]


def param(name: str, **kwargs: t.Any) -> t.Any:
    """
    dataclasses.field() that binds from the request parameter ``name``.

        @dataclass
        class Filter:
            id: int = param("id", default=0)
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG] = name
    return dataclasses.field(metadata=metadata, **kwargs)


class StructAttributeRegistry:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._attributes: t.Dict[type, StructAttributes] = {}

    def register(self, tp: t.Any) -> None:
        """Record the field mapping of a dataclass type (and nested ones)."""
        tp = resolve(optional_of(tp) or tp)
        if kind_of(tp) is not Kind.STRUCT or tp in self._attributes:
            return

        with self._lock:
            if tp in self._attributes:
                return
            attrs: StructAttributes = {}
            hints = field_types(tp)
            for f in dataclasses.fields(tp):
                if not f.init:
                    continue
                if kind_of(hints[f.name]) is Kind.STRUCT:
                    self.register(hints[f.name])
                    attrs[f.name] = WILDCARD
                else:
                    tag = f.metadata.get(TAG, "")
                    if tag:
                        attrs[f.name] = tag
            self._attributes[tp] = attrs

    def attributes(self, tp: t.Any) -> StructAttributes:
        tp = resolve(optional_of(tp) or tp)
        if tp not in self._attributes:
            self.register(tp)
        return dict(self._attributes.get(tp, {}))

    def __contains__(self, tp: object) -> bool:
        return tp in self._attributes

    def clear(self) -> None:
        with self._lock:
            self._attributes = {}
