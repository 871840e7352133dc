from __future__ import annotations

import asyncio
import logging
import time
from typing import Protocol

from app.application.dto.amm_stats import GetPoolsStatsInput
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.use_cases.amm_stats_common import PoolStatsCalculator, validate_window
from app.domain.entities.amm_stats import PoolStats
from app.domain.entities.pool import PoolBatchEntry, PoolSnapshot
from app.domain.entities.time_window import TimeWindow


logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class PoolsStatsStrategy(Protocol):
    name: str

    async def collect(self, window: TimeWindow) -> list[PoolStats]:
        ...


class NaivePoolsStatsStrategy:
    """One independent read and pricing pipeline per pool, run concurrently."""

    name = "naive"

    def __init__(self, *, transactor: ReadTransactorPort, calculator: PoolStatsCalculator):
        self._transactor = transactor
        self._calculator = calculator

    async def collect(self, window: TimeWindow) -> list[PoolStats]:
        started = time.perf_counter()
        async with self._transactor.begin() as session:
            snapshots = await session.pools.snapshots()
        logger.info("amm_stats: naive snapshots=%s took_ms=%s", len(snapshots), _elapsed_ms(started))

        tasks = [
            asyncio.create_task(self._pool_stats(pool, window, snapshots))
            for pool in snapshots
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        stats: list[PoolStats] = []
        for pool, result in zip(snapshots, results):
            if isinstance(result, BaseException):
                logger.warning(
                    "amm_stats: naive pool stats failed pool=%s error=%r",
                    pool.id,
                    result,
                )
                continue
            if result is not None:
                stats.append(result)
        logger.info(
            "amm_stats: naive pools=%s priced=%s took_ms=%s",
            len(snapshots),
            len(stats),
            _elapsed_ms(started),
        )
        return stats

    async def _pool_stats(
        self,
        pool: PoolSnapshot,
        window: TimeWindow,
        known_pools: list[PoolSnapshot],
    ) -> PoolStats | None:
        async with self._transactor.begin() as session:
            info = await session.pools.info(pool.id)
            if info is None:
                return None
            fees_and_volume = await session.pools.get_pool_fees_and_volumes(pool.id, window)
        return await self._calculator.pool_stats(
            pool=pool,
            info=info,
            volume_snapshot=fees_and_volume.volume() if fees_and_volume is not None else None,
            fees_snapshot=fees_and_volume.fees() if fees_and_volume is not None else None,
            window=window,
            known_pools=known_pools,
        )


class BatchedPoolsStatsStrategy:
    """All pool data read in one transaction, then priced sequentially."""

    name = "batched"

    def __init__(self, *, transactor: ReadTransactorPort, calculator: PoolStatsCalculator):
        self._transactor = transactor
        self._calculator = calculator

    async def collect(self, window: TimeWindow) -> list[PoolStats]:
        started = time.perf_counter()
        snapshots, batch = await self._read_batch(window)
        logger.info(
            "amm_stats: batched snapshots=%s indexed=%s took_ms=%s",
            len(snapshots),
            len(batch),
            _elapsed_ms(started),
        )

        stats: list[PoolStats] = []
        for entry in batch:
            result = await self._calculator.pool_stats(
                pool=entry.pool,
                info=entry.info,
                volume_snapshot=entry.volume,
                fees_snapshot=entry.fees,
                window=window,
                known_pools=snapshots,
            )
            if result is not None:
                stats.append(result)
        logger.info(
            "amm_stats: batched pools=%s priced=%s took_ms=%s",
            len(snapshots),
            len(stats),
            _elapsed_ms(started),
        )
        return stats

    async def _read_batch(self, window: TimeWindow) -> tuple[list[PoolSnapshot], list[PoolBatchEntry]]:
        batch: list[PoolBatchEntry] = []
        async with self._transactor.begin() as session:
            snapshots = await session.pools.snapshots()
            for pool in snapshots:
                info = await session.pools.info(pool.id)
                if info is None:
                    continue
                fees = await session.pools.fees(pool.id, window)
                volume = await session.pools.volume(pool.id, window)
                batch.append(PoolBatchEntry(pool=pool, info=info, fees=fees, volume=volume))
        return snapshots, batch


class GetPoolsStatsUseCase:
    def __init__(self, *, strategy: PoolsStatsStrategy):
        self._strategy = strategy

    @property
    def strategy_name(self) -> str:
        return self._strategy.name

    async def execute(self, command: GetPoolsStatsInput) -> list[PoolStats]:
        validate_window(command.window)
        return await self._strategy.collect(command.window)
