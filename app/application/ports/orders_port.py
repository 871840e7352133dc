from __future__ import annotations

from typing import Protocol

from app.domain.entities.orders import DepositVolumeRecord, SwapVolumeRecord
from app.domain.entities.time_window import TimeWindow


class OrdersPort(Protocol):
    async def get_swap_txs(self, window: TimeWindow) -> list[SwapVolumeRecord]:
        ...

    async def get_deposit_txs(self, window: TimeWindow) -> list[DepositVolumeRecord]:
        ...
