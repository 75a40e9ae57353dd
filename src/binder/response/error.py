from __future__ import annotations

import typing as t

from binder.response.base import Base


class Error(Base):
    """An error response: the body is exactly the message."""

    def __init__(self, status_code: int, message: str, *, content_type: str | None = None) -> None:
        super().__init__(status_code)
        self.message = message
        self.content_type = content_type

    def apply_to(self, response: t.Any) -> bytes:
        super().apply_to(response)
        return self.message.encode("utf-8")

    def __repr__(self) -> str:
        return f"Error(status_code={self.status_code!r}, message={self.message!r})"
