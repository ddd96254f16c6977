"""Exceptions raised by the availability engine."""
from __future__ import annotations

from typing import Optional


class UpstreamError(RuntimeError):
    """Raised when the inventory system rejects a request or cannot be reached."""

    def __init__(self, request_type: str, detail: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(f"{request_type} failed: {detail}")
        self.request_type = request_type
        self.detail = detail
        self.status_code = status_code
