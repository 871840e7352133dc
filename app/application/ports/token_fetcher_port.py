from __future__ import annotations

from typing import Protocol


class TokenFetcherPort(Protocol):
    async def fetch_tokens(self) -> set[str]:
        ...
