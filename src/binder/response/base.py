from __future__ import annotations

import typing as t


@t.runtime_checkable
class Response(t.Protocol):
    """Anything a wrapped handler may return: it renders itself onto the output."""

    def apply_to(self, response: t.Any) -> bytes: ...


class Base:
    """Status handling shared by the built-in responses."""

    content_type: str | None = None

    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code

    def set_status_code(self, status_code: int) -> None:
        """Set the HTTP status code"""
        self.status_code = status_code

    def apply_to(self, response: t.Any) -> bytes:
        response.status = self.status_code
        if self.content_type:
            response.headers["Content-Type"] = self.content_type
        return b""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r})"
