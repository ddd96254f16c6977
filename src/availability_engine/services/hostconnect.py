"""Async transport for the inventory system's request/reply envelopes."""
from __future__ import annotations

import logging
from contextlib import AbstractAsyncContextManager
from typing import Any, Dict, Optional, Protocol

import httpx

from availability_engine.core.errors import UpstreamError
from availability_engine.services.replies import dig

logger = logging.getLogger(__name__)

_ERROR_REWRITES: tuple[tuple[str, str], ...] = (
    ("DateFrom in the past", "1002 - Date is in the past"),
    ("1052 SCN", "1052 - OptionId not found(Check if it is Internet Enabled)"),
    (
        "SCN Server overloaded",
        "2051 - The inventory server is unavailable. Please wait a minute and try again. "
        "If you keep getting this error, please contact your inventory system administrator.",
    ),
)


class Transport(Protocol):
    endpoint: str
    agent_id: Optional[str]
    agent_password: Optional[str]

    async def call(self, request_type: str, body: Dict[str, Any]) -> Dict[str, Any]:
        ...


def rewrite_upstream_error(message: str) -> str:
    for marker, replacement in _ERROR_REWRITES:
        if marker in message:
            return replacement
    return message


class HostConnectClient(AbstractAsyncContextManager["HostConnectClient"]):
    """Posts ``{RequestType: {...}}`` envelopes and unwraps the matching reply."""

    def __init__(
        self,
        *,
        endpoint: str,
        agent_id: Optional[str],
        agent_password: Optional[str],
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        default_headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": "availability-engine/0.1.0",
        }
        if headers:
            default_headers.update(headers)
        self.endpoint = endpoint
        self.agent_id = agent_id
        self.agent_password = agent_password
        self._client = httpx.AsyncClient(timeout=timeout, headers=default_headers)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aexit__(self, exc_type, exc, exc_tb) -> None:
        await self.aclose()

    async def call(self, request_type: str, body: Dict[str, Any]) -> Dict[str, Any]:
        envelope = {
            request_type: {
                "AgentID": self.agent_id,
                "Password": self.agent_password,
                **body,
            }
        }
        logger.debug("Calling %s with %s", request_type, sorted(body))
        try:
            response = await self._client.post(self.endpoint, json=envelope)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                request_type,
                f"HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(request_type, str(exc) or exc.__class__.__name__) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(request_type, "malformed reply") from exc
        if not isinstance(payload, dict):
            raise UpstreamError(request_type, "no reply object")

        reply = payload.get("Reply")
        error = payload.get("error") or dig(reply, "ErrorReply", "Error")
        if error:
            raise UpstreamError(request_type, rewrite_upstream_error(str(error)))
        if not isinstance(reply, dict):
            raise UpstreamError(request_type, "no reply object")

        reply_type = request_type.replace("Request", "Reply")
        return reply.get(reply_type) or {}
