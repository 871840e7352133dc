from __future__ import annotations

from app.application.dto.amm_stats import GetPoolStatsInput
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.use_cases.amm_stats_common import (
    PoolStatsCalculator,
    validate_pool_id,
    validate_window,
)
from app.domain.entities.amm_stats import PoolStats


class GetPoolStatsUseCase:
    def __init__(self, *, transactor: ReadTransactorPort, calculator: PoolStatsCalculator):
        self._transactor = transactor
        self._calculator = calculator

    async def execute(self, command: GetPoolStatsInput) -> PoolStats | None:
        validate_pool_id(command.pool_id)
        validate_window(command.window)

        async with self._transactor.begin() as session:
            info = await session.pools.info(command.pool_id)
            if info is None:
                return None
            pool = await session.pools.snapshot(command.pool_id)
            if pool is None:
                return None
            volume = await session.pools.volume(command.pool_id, command.window)
            fees = await session.pools.fees(command.pool_id, command.window)

        return await self._calculator.pool_stats(
            pool=pool,
            info=info,
            volume_snapshot=volume,
            fees_snapshot=fees,
            window=command.window,
        )
