from __future__ import annotations

import logging

from app.application.ports.clock_port import ClockPort
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.ports.token_fetcher_port import TokenFetcherPort
from app.application.use_cases.amm_stats_common import PoolStatsCalculator
from app.domain.entities.amm_stats import PoolSummary, TotalValueLocked
from app.domain.entities.pool import PoolSnapshot, PoolVolumeSnapshot
from app.domain.entities.time_window import TimeWindow
from app.domain.entities.units import NATIVE_TOKEN_ID
from app.domain.services.decimals import normalize_amount
from app.domain.services.real_price import calculate_display_price


logger = logging.getLogger(__name__)


def pick_max_tvl_pools(
    priced: list[tuple[TotalValueLocked, PoolSnapshot]],
) -> list[PoolSnapshot]:
    """One pool per (x, y) pair, the one holding the highest TVL."""
    best: dict[tuple[str, str], tuple[TotalValueLocked, PoolSnapshot]] = {}
    for tvl, pool in priced:
        key = (pool.locked_x.id, pool.locked_y.id)
        current = best.get(key)
        if current is None or tvl.value > current[0].value:
            best[key] = (tvl, pool)
    return [pool for _, pool in best.values()]


def build_pool_summary(pool: PoolSnapshot, volume: PoolVolumeSnapshot) -> PoolSummary:
    x = pool.locked_x
    y = pool.locked_y
    return PoolSummary(
        base_id=x.id,
        base_symbol=x.ticker,
        base_name=x.ticker,
        quote_id=y.id,
        quote_symbol=y.ticker,
        quote_name=y.ticker,
        last_price=calculate_display_price(
            amount_x=x.amount,
            decimals_x=x.decimals,
            amount_y=y.amount,
            decimals_y=y.decimals,
        ),
        base_volume=normalize_amount(volume.volume_by_x.amount, volume.volume_by_x.decimals),
        quote_volume=normalize_amount(volume.volume_by_y.amount, volume.volume_by_y.decimals),
    )


class GetPoolsSummaryUseCase:
    def __init__(
        self,
        *,
        transactor: ReadTransactorPort,
        token_fetcher: TokenFetcherPort,
        calculator: PoolStatsCalculator,
        clock: ClockPort,
        window_ms: int,
        native_token_id: str = NATIVE_TOKEN_ID,
    ):
        self._transactor = transactor
        self._token_fetcher = token_fetcher
        self._calculator = calculator
        self._clock = clock
        self._window_ms = window_ms
        self._native_token_id = native_token_id

    async def execute(self) -> list[PoolSummary]:
        window = TimeWindow.trailing(now_ms=self._clock.now_ms(), duration_ms=self._window_ms)
        valid_tokens = await self._token_fetcher.fetch_tokens()
        async with self._transactor.begin() as session:
            volumes = await session.pools.volumes(window)
            snapshots = await session.pools.snapshots(recent_only=True)

        native_pools = [
            pool
            for pool in snapshots
            if pool.locked_x.id == self._native_token_id and pool.locked_y.id in valid_tokens
        ]
        priced: list[tuple[TotalValueLocked, PoolSnapshot]] = []
        for pool in native_pools:
            tvl = await self._calculator.tvl(pool)
            if tvl is None:
                logger.debug("amm_stats: pools summary skipping unpriced pool=%s", pool.id)
                continue
            priced.append((tvl, pool))

        volumes_by_pool = {volume.pool_id: volume for volume in volumes}
        summaries: list[PoolSummary] = []
        for pool in pick_max_tvl_pools(priced):
            volume = volumes_by_pool.get(pool.id)
            if volume is None:
                continue
            summaries.append(build_pool_summary(pool, volume))
        return summaries
