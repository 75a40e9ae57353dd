"""CherryPy entrypoint helpers for wrapped handlers."""
from __future__ import annotations

import typing as t

import cherrypy

from binder.config import Settings, get_settings
from binder.logger import get_logger
from binder.wrapper import Wrapper

logger = get_logger(__name__)


def mount(handlers: t.Mapping[str, Wrapper], *, root: str = "") -> None:
    """
    Mount each wrapper on cherrypy.tree at root + path.

      {"/notes": wrap(list_notes, "page")} -> /notes, /notes/<page>
    """
    app_config = {
        "/": {
            "tools.encode.on": True,
            "tools.encode.encoding": "utf-8",
        }
    }
    prefix = "/" + root.strip("/") if root.strip("/") else ""
    for path, handler in handlers.items():
        if not isinstance(handler, Wrapper):
            raise TypeError(f"{path}: expected a Wrapper, got {type(handler).__name__}")
        mount_path = prefix + "/" + path.strip("/")
        cherrypy.tree.mount(handler, mount_path.rstrip("/") or "", config=app_config)
        logger.info("mounted %r at %s", handler, mount_path)


def serve(handlers: t.Mapping[str, Wrapper], settings: Settings | None = None, *, root: str = "") -> None:
    """Configure the CherryPy engine from settings, mount handlers and block."""
    settings = settings or get_settings()

    cherrypy.config.update({
        "server.socket_host": settings.app_host,
        "server.socket_port": settings.app_port,
        "tools.trailing_slash.on": False,
        "engine.autoreload.on": settings.app_env == "dev",
    })

    mount(handlers, root=root)

    cherrypy.engine.start()
    cherrypy.engine.block()
