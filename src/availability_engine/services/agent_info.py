"""Agent-level lookups cached per credential set."""
from __future__ import annotations

import hashlib
import logging
import re
from typing import Optional

from availability_engine.services.hostconnect import Transport
from availability_engine.utils.cache import TtlCache

logger = logging.getLogger(__name__)

AGENT_INFO_REQUEST = "AgentInfoRequest"
AGENT_CURRENCY_TTL_S = 7 * 24 * 60 * 60

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def agent_currency_cache_key(agent_id: Optional[str], password: Optional[str], endpoint: str) -> str:
    """Derive a cache key that never exposes the credentials it is scoped to."""
    sanitized_endpoint = _NON_ALNUM.sub("", endpoint or "")
    raw = f"{agent_id or ''}|{password or ''}|{sanitized_endpoint}"
    digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()[:16]
    return f"agentCurrencyCode_{digest}"


class AgentInfoClient:
    def __init__(
        self,
        transport: Transport,
        *,
        cache: Optional[TtlCache] = None,
        ttl_s: float = AGENT_CURRENCY_TTL_S,
    ) -> None:
        self.transport = transport
        self.cache = cache
        self.ttl_s = ttl_s

    async def _fetch_currency(self) -> Optional[str]:
        reply = await self.transport.call(AGENT_INFO_REQUEST, {})
        currency = reply.get("Currency")
        return str(currency) if currency else None

    async def get_agent_currency(self) -> Optional[str]:
        """Return the agent's currency code.

        The lookup only runs behind a cache; without one, or when the cached lookup
        fails, the currency is treated as unknown.
        """
        if self.cache is None:
            return None
        key = agent_currency_cache_key(
            self.transport.agent_id, self.transport.agent_password, self.transport.endpoint
        )
        try:
            return await self.cache.get_or_exec(key, self._fetch_currency, self.ttl_s)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Agent currency lookup failed: %s", exc)
            return None
