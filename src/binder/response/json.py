from __future__ import annotations

import json
import typing as t
from dataclasses import asdict, is_dataclass

from binder.config import Settings, get_settings
from binder.logger import get_logger
from binder.response.base import Base

logger = get_logger(__name__)

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


def _dataclass_to_plain(x: t.Any) -> t.Any:
    """Recursively convert dataclasses to plain dicts/lists."""
    if is_dataclass(x) and not isinstance(x, type):
        return {k: _dataclass_to_plain(v) for k, v in asdict(x).items()}
    if isinstance(x, (list, tuple)):
        return [_dataclass_to_plain(v) for v in x]
    if isinstance(x, dict):
        return {k: _dataclass_to_plain(v) for k, v in x.items()}
    return x


class Json(Base):
    """
    A JSON response. Dataclass payloads are converted to plain objects.

    Without an explicit indent the one from settings is used: the wrapping
    registry's settings when rendered by a Wrapper, else the global ones.
    """

    def __init__(
        self,
        data: t.Any,
        status_code: int = 200,
        *,
        indent: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(status_code)
        self.data = data
        self.indent = indent
        self.settings = settings

    def apply_to(self, response: t.Any) -> bytes:
        if self.indent is not None:
            indent: int | None = self.indent
        else:
            indent = (self.settings or get_settings()).json_indent
        try:
            payload = json.dumps(_dataclass_to_plain(self.data), indent=indent)
        except (TypeError, ValueError) as exc:
            logger.warning("JSON serialization failed: %s", exc)
            response.status = 500
            return str(exc).encode("utf-8")

        response.headers["Content-Type"] = JSON_CONTENT_TYPE
        super().apply_to(response)
        return payload.encode("utf-8")
