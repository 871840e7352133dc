from __future__ import annotations

import logging
import time
from threading import Lock

import httpx

from app.application.ports.token_fetcher_port import TokenFetcherPort


logger = logging.getLogger(__name__)


class TokenListFetchError(RuntimeError):
    pass


def parse_token_list(payload) -> set[str]:
    """Accepts ``{"tokens": [{"address": ...}]}`` or a bare list of ids/objects."""
    entries = payload.get("tokens") if isinstance(payload, dict) else payload
    if not isinstance(entries, list):
        raise TokenListFetchError("Token list payload must contain a list of tokens.")
    tokens: set[str] = set()
    for entry in entries:
        if isinstance(entry, str):
            tokens.add(entry)
        elif isinstance(entry, dict):
            token_id = entry.get("address") or entry.get("id") or entry.get("tokenId")
            if token_id:
                tokens.add(str(token_id))
    return tokens


class TokenListClient(TokenFetcherPort):
    def __init__(
        self,
        *,
        url: str,
        timeout_seconds: float,
        always_valid: frozenset[str] = frozenset(),
        cache_ttl_seconds: float = 600,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.timeout = timeout_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self._always_valid = always_valid
        self._transport = transport
        self._cached: tuple[float, frozenset[str]] | None = None
        self._lock = Lock()

    async def fetch_tokens(self) -> set[str]:
        cached = self._cache_get()
        if cached is not None:
            return set(cached)

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(self.url)
            response.raise_for_status()
            payload = response.json()

        tokens = frozenset(parse_token_list(payload) | self._always_valid)
        logger.info("token_list_client: fetched tokens=%s", len(tokens))
        self._cache_set(tokens)
        return set(tokens)

    def _cache_get(self) -> frozenset[str] | None:
        if self.cache_ttl_seconds <= 0:
            return None
        with self._lock:
            if self._cached is None:
                return None
            expires_at, tokens = self._cached
            if expires_at <= time.monotonic():
                self._cached = None
                return None
            return tokens

    def _cache_set(self, tokens: frozenset[str]) -> None:
        if self.cache_ttl_seconds <= 0:
            return
        with self._lock:
            self._cached = (time.monotonic() + self.cache_ttl_seconds, tokens)
