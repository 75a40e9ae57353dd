"""Wrap plain callables as CherryPy handlers with bound, typed arguments."""
from __future__ import annotations

import inspect
import types
import typing as t
from dataclasses import dataclass

import cherrypy

from binder.attributes import WILDCARD
from binder.exceptions import NonConformingHandlerError, WrapError
from binder.kinds import resolve
from binder.logger import get_logger, push_request_id, reset_request_id
from binder.registry import BinderRegistry, default_registry
from binder.response import Json, Response
from binder.values import RequestValues

logger = get_logger(__name__)

_BOUND_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.VAR_POSITIONAL,
    inspect.Parameter.KEYWORD_ONLY,
)


@dataclass(frozen=True)
class ActionArg:
    """One parameter of a wrapped callable."""

    name: str  # source parameter name, or "*"
    type: t.Any
    param: str  # python parameter name
    kind: inspect._ParameterKind


def _type_hints(call: t.Callable[..., t.Any]) -> dict[str, t.Any]:
    func = getattr(call, "__func__", call)
    if not hasattr(func, "__annotations__"):
        return {}
    try:
        return t.get_type_hints(func, include_extras=True)
    except (NameError, TypeError) as exc:
        raise WrapError(call, f"cannot resolve type hints: {exc}") from exc


def _is_response_type(tp: t.Any) -> bool:
    tp = resolve(tp)
    if t.get_origin(tp) in (t.Union, types.UnionType):
        return all(_is_response_type(a) for a in t.get_args(tp))
    if t.get_origin(tp) is not None:
        return False
    return inspect.isclass(tp) and issubclass(tp, Response)


class Wrapper:
    """
    A CherryPy handler wrapping a controller action.

    Example:
        def show(id: int, verbose: bool) -> Json: ...
        cherrypy.tree.mount(binder.wrap(show, "id", "verbose"), "/show")
    """

    def __init__(
        self,
        call: t.Callable[..., t.Any],
        *params: str,
        exact: bool = False,
        registry: BinderRegistry | None = None,
    ) -> None:
        if not callable(call):
            raise WrapError(call, "not callable")
        self.call = call
        self.registry = registry or default_registry

        sig = inspect.signature(call)
        hints = _type_hints(call)
        declared = [p for p in sig.parameters.values() if p.kind in _BOUND_KINDS]

        if exact and len(params) != len(declared):
            raise WrapError(call, f"expected {len(declared)} parameter names, got {len(params)}")
        if len(params) > len(declared):
            raise WrapError(call, f"takes {len(declared)} parameters, got {len(params)} names")

        self.is_variadic = any(p.kind is p.VAR_POSITIONAL for p in declared)
        self.args: list[ActionArg] = []
        for i, p in enumerate(declared):
            typ = hints.get(p.name, p.annotation)
            if p.kind is p.VAR_POSITIONAL:
                typ = list[str] if typ is inspect.Parameter.empty else list[typ]
            name = params[i] if i < len(params) else WILDCARD
            self.args.append(ActionArg(name=name, type=typ, param=p.name, kind=p.kind))
            # pay struct registration once, here, rather than per request
            try:
                self.registry.struct_attributes.register(typ)
            except (NameError, TypeError) as exc:
                raise WrapError(call, f"cannot resolve type hints of {p.name}: {exc}") from exc

        if "return" in hints and not _is_response_type(hints["return"]):
            raise NonConformingHandlerError(
                call, f"return type {hints['return']!r} does not implement apply_to()"
            )

        logger.debug("wrapped %s with %s", getattr(call, "__qualname__", call), self.args)

    def __call__(self, *args: t.Any, **kwargs: t.Any) -> t.Any:
        return self.call(*args, **kwargs)

    def __repr__(self) -> str:
        names = ", ".join(a.name for a in self.args)
        return f"<Wrapper {getattr(self.call, '__qualname__', self.call)}({names})>"

    def bind_arguments(self, values: RequestValues) -> tuple[list[t.Any], dict[str, t.Any]]:
        """Build the positional and keyword arguments for one call."""
        args: list[t.Any] = []
        kwargs: dict[str, t.Any] = {}
        for a in self.args:
            value = self.registry.bound_value(values, a.name, a.type)
            if a.kind is inspect.Parameter.VAR_POSITIONAL:
                args.extend(value)
            elif a.kind is inspect.Parameter.KEYWORD_ONLY:
                kwargs[a.param] = value
            else:
                args.append(value)
        return args, kwargs

    def handle(
        self,
        request: t.Any,
        response: t.Any,
        path_vars: t.Mapping[str, str] | None = None,
    ) -> bytes:
        """Bind request values, invoke the action and render its result."""
        token = push_request_id(str(getattr(request, "unique_id", "") or ""))
        try:
            values = RequestValues.from_request(
                request, path_vars, separator=self.registry.settings.list_separator
            )
            args, kwargs = self.bind_arguments(values)
            result = self.call(*args, **kwargs)
            if not isinstance(result, Response):
                raise NonConformingHandlerError(
                    self.call, f"returned {type(result).__name__}, not a Response"
                )
            if isinstance(result, Json) and result.settings is None:
                result.settings = self.registry.settings
            return result.apply_to(response)
        finally:
            reset_request_id(token)

    @cherrypy.expose
    def index(self, *vpath: str, **_params: t.Any) -> bytes:
        return self.default(*vpath)

    @cherrypy.expose
    def default(self, *vpath: str, **_params: t.Any) -> bytes:
        """Extra path segments fill the named parameters, in order."""
        names = [a.name for a in self.args if a.name != WILDCARD]
        if len(vpath) > len(names):
            raise cherrypy.HTTPError(404)
        path_vars = dict(zip(names, vpath))
        return self.handle(cherrypy.request, cherrypy.response, path_vars)


def wrap(call: t.Callable[..., t.Any], *params: str, registry: BinderRegistry | None = None) -> Wrapper:
    """
    Wraps a controller action. Parameters left unnamed bind from the
    whole value set ("*"): dataclasses, mappings, the request itself.

    Example:
        def list_items(page: int, filters: Filters) -> Json: ...
        binder.wrap(list_items, "page")
    """
    return Wrapper(call, *params, registry=registry)


def action_handler(call: t.Callable[..., t.Any], *params: str, registry: BinderRegistry | None = None) -> Wrapper:
    """Like wrap() but every parameter must be named."""
    return Wrapper(call, *params, exact=True, registry=registry)


def params(*names: str, registry: BinderRegistry | None = None) -> t.Callable[[t.Callable[..., t.Any]], Wrapper]:
    """Decorator form of wrap()."""
    def deco(fn: t.Callable[..., t.Any]) -> Wrapper:
        return wrap(fn, *names, registry=registry)
    return deco
