from __future__ import annotations

from typing import Protocol

from app.domain.entities.market import Market


class MarketsPort(Protocol):
    async def get_by_asset(self, token_id: str) -> list[Market]:
        ...
