from __future__ import annotations

import typing as t

from binder.response.base import Base


class Basic(Base):
    """A plain body with an optional status code."""

    def __init__(
        self,
        content: str | bytes = "",
        status_code: int = 200,
        *,
        content_type: str | None = None,
    ) -> None:
        super().__init__(status_code)
        self.content = content
        self.content_type = content_type

    def apply_to(self, response: t.Any) -> bytes:
        super().apply_to(response)
        if isinstance(self.content, (bytes, bytearray)):
            return bytes(self.content)
        return self.content.encode("utf-8")


class Redirect(Base):
    def __init__(self, location: str, status_code: int = 303) -> None:
        super().__init__(status_code)
        self.location = location

    def apply_to(self, response: t.Any) -> bytes:
        super().apply_to(response)
        response.headers["Location"] = self.location
        return b""
