"""binder.

Bind request parameters (path variables, query string, form and JSON
bodies) to the typed arguments of plain Python callables, and serve them
as CherryPy handlers that return renderable responses.
"""

from binder.attributes import WILDCARD, StructAttributeRegistry, param
from binder.exceptions import BinderError, NonConformingHandlerError, WrapError
from binder.kinds import Kind, UInt
from binder.registry import (
    BindContext,
    BinderRegistry,
    Bound,
    default_registry,
    register,
    register_kind,
    register_type,
)
from binder.response import Basic, Error, Json, Redirect, Response
from binder.server import mount, serve
from binder.values import RequestValues
from binder.wrapper import ActionArg, Wrapper, action_handler, params, wrap

__version__ = "0.1.0"

__all__ = [
    "ActionArg",
    "Basic",
    "BindContext",
    "BinderError",
    "BinderRegistry",
    "Bound",
    "Error",
    "Json",
    "Kind",
    "NonConformingHandlerError",
    "Redirect",
    "RequestValues",
    "Response",
    "StructAttributeRegistry",
    "UInt",
    "WILDCARD",
    "Wrapper",
    "WrapError",
    "action_handler",
    "default_registry",
    "mount",
    "param",
    "params",
    "register",
    "register_kind",
    "register_type",
    "serve",
    "wrap",
]
