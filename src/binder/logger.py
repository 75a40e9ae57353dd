import contextvars
import logging
import sys
from typing import Optional

# Id of the request currently being bound, for log correlation
_REQUEST_ID: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="-")


class _RequestFilter(logging.Filter):
    """Logging filter that injects the request_id from contextvars into the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _REQUEST_ID.get()
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | req=%(request_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_logging(level: str = "INFO") -> None:
    """
    Attach the binder stdout handler to the ``binder`` logger.

    Safe to call multiple times; the handler is installed once and later
    calls only update the level.
    """
    binder_logger = logging.getLogger("binder")
    binder_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for h in binder_logger.handlers:
        if any(isinstance(f, _RequestFilter) for f in h.filters):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_RequestFilter())
    binder_logger.addHandler(handler)
    # CherryPy already logs to the root logger; don't print twice
    binder_logger.propagate = False


def get_logger(name: str = "binder") -> logging.Logger:
    """Return a logger under the ``binder`` namespace, configured from settings."""
    from binder.config import get_settings

    configure_logging(get_settings().log_level)
    return logging.getLogger(name)


def push_request_id(request_id: Optional[str]) -> Optional[contextvars.Token]:
    """Set the current request id in context and return a token for later reset."""
    if not request_id:
        return None
    return _REQUEST_ID.set(request_id)


def reset_request_id(token: Optional[contextvars.Token]) -> None:
    """Reset the request id context using the provided token (if any)."""
    if token is None:
        return
    _REQUEST_ID.reset(token)
