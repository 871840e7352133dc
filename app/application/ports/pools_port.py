from __future__ import annotations

from typing import Protocol

from app.domain.entities.asset import AssetInfo
from app.domain.entities.pool import (
    PoolFeesAndVolumeSnapshot,
    PoolFeesSnapshot,
    PoolInfo,
    PoolSnapshot,
    PoolTrace,
    PoolVolumeSnapshot,
    TimestampedAmounts,
)
from app.domain.entities.time_window import TimeWindow


class PoolsPort(Protocol):
    async def snapshots(self, *, recent_only: bool = False) -> list[PoolSnapshot]:
        ...

    async def snapshot(self, pool_id: str) -> PoolSnapshot | None:
        ...

    async def info(self, pool_id: str) -> PoolInfo | None:
        ...

    async def volumes(self, window: TimeWindow) -> list[PoolVolumeSnapshot]:
        ...

    async def volume(self, pool_id: str, window: TimeWindow) -> PoolVolumeSnapshot | None:
        ...

    async def fees(self, pool_id: str, window: TimeWindow) -> PoolFeesSnapshot | None:
        ...

    async def get_pool_fees_and_volumes(
        self,
        pool_id: str,
        window: TimeWindow,
    ) -> PoolFeesAndVolumeSnapshot | None:
        ...

    async def trace(self, pool_id: str, *, depth: int, max_height: int) -> list[PoolTrace]:
        ...

    async def prev_trace(self, pool_id: str, *, depth: int, max_height: int) -> PoolTrace | None:
        ...

    async def avg_amounts(
        self,
        pool_id: str,
        window: TimeWindow,
        *,
        resolution: int,
    ) -> list[TimestampedAmounts]:
        ...

    async def asset_by_id(self, token_id: str) -> AssetInfo | None:
        ...
