"""
Exception classes for binder.

Binding itself never raises: missing or malformed input degrades to the
target type's zero value. These errors cover configuration mistakes that
should stop an application at startup.
"""


class BinderError(Exception):
    """Base exception class for all binder exceptions."""

    pass


class WrapError(BinderError):
    """
    Raised when a callable cannot be wrapped as a request handler.

    Typically the number of parameter names does not match the callable's
    declared parameters.
    """

    def __init__(self, call: object, reason: str):
        self.call = call
        self.reason = reason
        name = getattr(call, "__qualname__", None) or repr(call)
        super().__init__(f"Cannot wrap {name}: {reason}")


class NonConformingHandlerError(WrapError):
    """Raised when a wrapped callable does not return a Response."""

    pass
