"""Raw string values collected from a CherryPy request."""
from __future__ import annotations

import json
import typing as t
from types import MappingProxyType

import cherrypy


def _first(value: t.Any) -> t.Any:
    if isinstance(value, (list, tuple)):
        return value[0] if value else ""
    return value


def _to_text(value: t.Any, separator: str) -> str | None:
    """Flatten a JSON body value into the textual form converters parse."""
    if value is None or isinstance(value, dict):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        items = [_to_text(v, separator) for v in value]
        return separator.join(i for i in items if i is not None)
    return str(value)


class RequestValues:
    """
    Read-only view over the values of one request.

    Lookup order for a name:
      1. router-supplied path variables
      2. a ":name" entry in the request params (pat-style path parameter)
      3. query string / form params
      4. top-level keys of a JSON object body
    """

    def __init__(
        self,
        params: t.Mapping[str, t.Any] | None = None,
        *,
        path_vars: t.Mapping[str, str] | None = None,
        body: t.Mapping[str, t.Any] | None = None,
        request: t.Any = None,
        separator: str = ",",
    ) -> None:
        self._params = MappingProxyType(dict(params or {}))
        self._path_vars = MappingProxyType(dict(path_vars or {}))
        self._body = MappingProxyType(
            {k: v for k, v in (body or {}).items() if _to_text(v, separator) is not None}
        )
        self._separator = separator
        self.request = request

    @classmethod
    def from_request(
        cls,
        request: t.Any,
        path_vars: t.Mapping[str, str] | None = None,
        *,
        separator: str = ",",
    ) -> "RequestValues":
        body = read_json_body(request)
        return cls(
            getattr(request, "params", None),
            path_vars=path_vars,
            body=body if isinstance(body, dict) else None,
            request=request,
            separator=separator,
        )

    def get(self, name: str) -> str:
        """Return the raw value for name, or "" when no source has it."""
        if name in self._path_vars:
            return str(self._path_vars[name])
        if ":" + name in self._params:
            return str(_first(self._params[":" + name]))
        if name in self._params:
            return str(_first(self._params[name]))
        if name in self._body:
            return _to_text(self._body[name], self._separator) or ""
        return ""

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and (
            name in self._path_vars
            or ":" + name in self._params
            or name in self._params
            or name in self._body
        )

    def names(self) -> list[str]:
        seen: dict[str, None] = {}
        for key in list(self._path_vars) + list(self._params) + list(self._body):
            seen.setdefault(key[1:] if key.startswith(":") else key, None)
        return list(seen)

    def to_dict(self) -> dict[str, str]:
        return {name: self.get(name) for name in self.names()}

    def with_value(self, name: str, value: str) -> "RequestValues":
        """Copy of these values where name resolves to value; self is untouched."""
        path_vars = dict(self._path_vars)
        path_vars[name] = value
        return RequestValues(
            self._params,
            path_vars=path_vars,
            body=self._body,
            request=self.request,
            separator=self._separator,
        )


def read_json_body(request: t.Any) -> t.Any:
    """Parse and cache a JSON request body, returning the value or None."""
    if request is None:
        return None
    if hasattr(request, "_cached_json"):
        return getattr(request, "_cached_json")

    headers = getattr(request, "headers", None) or {}
    ct = (headers.get("Content-Type") or "").lower()
    body = getattr(request, "body", None)
    if "application/json" not in ct or body is None:
        setattr(request, "_cached_json", None)
        return None

    raw = body.read() or b"{}"
    try:
        val = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        raise cherrypy.HTTPError(400, "Invalid JSON")

    setattr(request, "_cached_json", val)
    return val
