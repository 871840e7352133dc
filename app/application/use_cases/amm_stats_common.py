from __future__ import annotations

from collections.abc import Sequence

from app.application.ports.clock_port import ClockPort
from app.application.services.price_solver import FiatPriceSolver
from app.domain.entities.amm_stats import Fees, PoolStats, TotalValueLocked, Volume
from app.domain.entities.pool import (
    PoolFeesSnapshot,
    PoolInfo,
    PoolSnapshot,
    PoolVolumeSnapshot,
)
from app.domain.entities.time_window import TimeWindow
from app.domain.entities.units import FiatUnits
from app.domain.exceptions import AmmStatsInputError
from app.domain.services.amm_stats_math import fee_percent_projection


def validate_window(window: TimeWindow) -> None:
    if window.from_ms is not None and window.from_ms < 0:
        raise AmmStatsInputError("from must be a non-negative timestamp.")
    if window.to_ms is not None and window.to_ms < 0:
        raise AmmStatsInputError("to must be a non-negative timestamp.")
    if window.from_ms is not None and window.to_ms is not None and window.from_ms > window.to_ms:
        raise AmmStatsInputError("from must not be after to.")


def validate_pool_id(pool_id: str) -> None:
    if not pool_id or not pool_id.strip():
        raise AmmStatsInputError("pool_id is required.")


class PoolStatsCalculator:
    """Prices one pool's reserves, volume and fees into ``units``."""

    def __init__(
        self,
        *,
        fiat_solver: FiatPriceSolver,
        clock: ClockPort,
        units: FiatUnits,
        projection_ms: int,
    ):
        self._fiat_solver = fiat_solver
        self._clock = clock
        self._units = units
        self._projection_ms = projection_ms

    async def tvl(
        self,
        pool: PoolSnapshot,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> TotalValueLocked | None:
        locked_x = await self._fiat_solver.convert(pool.locked_x, self._units, known_pools)
        if locked_x is None:
            return None
        locked_y = await self._fiat_solver.convert(pool.locked_y, self._units, known_pools)
        if locked_y is None:
            return None
        return TotalValueLocked(value=locked_x.value + locked_y.value, units=self._units)

    async def volume(
        self,
        snapshot: PoolVolumeSnapshot | None,
        window: TimeWindow,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> Volume | None:
        if snapshot is None:
            return Volume.empty(self._units, window)
        volume_x = await self._fiat_solver.convert(snapshot.volume_by_x, self._units, known_pools)
        if volume_x is None:
            return None
        volume_y = await self._fiat_solver.convert(snapshot.volume_by_y, self._units, known_pools)
        if volume_y is None:
            return None
        return Volume(value=volume_x.value + volume_y.value, units=self._units, window=window)

    async def fees(
        self,
        snapshot: PoolFeesSnapshot | None,
        window: TimeWindow,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> Fees | None:
        if snapshot is None:
            return Fees.empty(self._units, window)
        fees_x = await self._fiat_solver.convert(snapshot.fees_by_x, self._units, known_pools)
        if fees_x is None:
            return None
        fees_y = await self._fiat_solver.convert(snapshot.fees_by_y, self._units, known_pools)
        if fees_y is None:
            return None
        return Fees(value=fees_x.value + fees_y.value, units=self._units, window=window)

    async def pool_stats(
        self,
        *,
        pool: PoolSnapshot,
        info: PoolInfo,
        volume_snapshot: PoolVolumeSnapshot | None,
        fees_snapshot: PoolFeesSnapshot | None,
        window: TimeWindow,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> PoolStats | None:
        tvl = await self.tvl(pool, known_pools)
        if tvl is None:
            return None
        volume = await self.volume(volume_snapshot, window, known_pools)
        if volume is None:
            return None
        fees = await self.fees(fees_snapshot, window, known_pools)
        if fees is None:
            return None
        window_ms = window.duration_ms(
            now_ms=self._clock.now_ms(),
            fallback_from_ms=info.first_swap_timestamp,
        )
        yearly_fees_percent = fee_percent_projection(
            tvl_value=tvl.value,
            fees_value=fees.value,
            window_ms=window_ms,
            projection_ms=self._projection_ms,
        )
        return PoolStats(
            pool_id=pool.id,
            locked_x=pool.locked_x,
            locked_y=pool.locked_y,
            tvl=tvl,
            volume=volume,
            fees=fees,
            yearly_fees_percent=yearly_fees_percent,
        )
