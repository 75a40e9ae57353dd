"""Default converters: raw request strings to typed values."""
from __future__ import annotations

import math
import re
import typing as t

from cherrypy._cprequest import Request

from binder.attributes import WILDCARD
from binder.kinds import Kind, container_of, element_type, field_types, resolve, struct_defaults
from binder.logger import get_logger
from binder.registry import Bound

if t.TYPE_CHECKING:
    from binder.registry import BindContext, Converter

logger = get_logger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_UINT_RE = re.compile(r"[0-9]+")
_INT64_MIN, _INT64_MAX = -(2**63), 2**63 - 1
_UINT64_MAX = 2**64 - 1
_INF_SPELLINGS = ("inf", "infinity")


def _parse_int(val: str, pattern: re.Pattern[str], lo: int, hi: int) -> int | None:
    if not pattern.fullmatch(val):
        return None
    # 64-bit values never need more than 20 significant digits
    if len(val.lstrip("+-").lstrip("0")) > 20:
        return None
    parsed = int(val)
    return parsed if lo <= parsed <= hi else None


def _construct(tp: t.Any, parsed: t.Any, zero: t.Any) -> Bound:
    """Build tp from a parsed builtin; subclasses like IntEnum may refuse."""
    cls = resolve(tp)
    if not isinstance(cls, type) or type(parsed) is cls:
        return Bound(parsed, False)
    try:
        return Bound(cls(parsed), False)
    except (TypeError, ValueError):
        return Bound(zero, True)


def int_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds a signed integer."""
    val = ctx.get(name)
    if not val:
        return Bound(0, True)
    parsed = _parse_int(val, _INT_RE, _INT64_MIN, _INT64_MAX)
    if parsed is None:
        logger.debug("param %r: %r is not an integer", name, val)
        return Bound(0, True)
    return _construct(tp, parsed, 0)


def uint_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds an unsigned integer."""
    val = ctx.get(name)
    if not val:
        return Bound(0, True)
    parsed = _parse_int(val, _UINT_RE, 0, _UINT64_MAX)
    if parsed is None:
        logger.debug("param %r: %r is not an unsigned integer", name, val)
        return Bound(0, True)
    # UInt is a NewType over int, so no constructor to apply
    return Bound(parsed, False)


def float_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    val = ctx.get(name)
    if not val:
        return Bound(0.0, True)
    if val != val.strip() or "_" in val:
        logger.debug("param %r: %r is not a float", name, val)
        return Bound(0.0, True)
    try:
        parsed = float(val)
    except ValueError:
        logger.debug("param %r: %r is not a float", name, val)
        return Bound(0.0, True)
    if math.isinf(parsed) and val.lstrip("+-").lower() not in _INF_SPELLINGS:
        logger.debug("param %r: %r is out of range", name, val)
        return Bound(0.0, True)
    return _construct(tp, parsed, 0.0)


def string_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    val = ctx.get(name)
    cls = resolve(tp)
    if isinstance(cls, type) and issubclass(cls, str) and cls is not str:
        # StrEnum and friends
        try:
            return Bound(cls(val), False)
        except ValueError:
            return Bound("", True)
    return Bound(val, False)


def bool_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """
    Binds a boolean value, using the following formats:
    "true" and "false"
    "on" and "" (a checkbox)
    "1" and "0"
    "yes" and "no"
    Anything unrecognised is False; never absent.
    """
    val = ctx.get(name).strip().lower()
    return Bound(val in ctx.settings.normalized_true_values, False)


def slice_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds a separator delimited list; bad items fall back to their zero value."""
    container = container_of(tp)
    val = ctx.get(name)
    if val == "":
        return Bound(container(), True)

    elem = element_type(tp)
    items = [
        ctx.with_value(name, item).bind(name, elem).value
        for item in val.split(ctx.settings.list_separator)
    ]
    return Bound(container(items), False)


def struct_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds a set of parameters to a dataclass."""
    cls = resolve(tp)
    kwargs = struct_defaults(cls)
    hints = field_types(cls)
    for field_name, attr_name in ctx.registry.struct_attributes.attributes(cls).items():
        if attr_name != WILDCARD and attr_name not in ctx.values:
            # missing input keeps the declared default
            continue
        value, absent = ctx.bind(attr_name, hints[field_name])
        if not absent:
            kwargs[field_name] = value
    return Bound(cls(**kwargs), False)


def pointer_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds an Optional[T]. If nothing found, returns None."""
    value, absent = ctx.bind(name, element_type(tp))
    if absent:
        return Bound(None, True)
    return Bound(value, False)


def mapping_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds every available value, for wildcard parameters."""
    values = ctx.values.to_dict()
    return Bound(values, not values)


def request_binder(ctx: "BindContext", name: str, tp: t.Any) -> Bound:
    """Binds the CherryPy request itself."""
    return Bound(ctx.request, ctx.request is None)


KIND_BINDERS: dict[Kind, "Converter"] = {
    Kind.INT: int_binder,
    Kind.UINT: uint_binder,
    Kind.FLOAT: float_binder,
    Kind.STRING: string_binder,
    Kind.BOOL: bool_binder,
    Kind.SLICE: slice_binder,
    Kind.STRUCT: struct_binder,
    Kind.POINTER: pointer_binder,
    Kind.MAPPING: mapping_binder,
}


def type_binders() -> dict[t.Any, "Converter"]:
    return {Request: request_binder}
