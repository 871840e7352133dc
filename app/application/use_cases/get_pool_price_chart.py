from __future__ import annotations

from app.application.dto.amm_stats import GetPoolPriceChartInput
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.use_cases.amm_stats_common import validate_pool_id, validate_window
from app.domain.entities.amm_stats import PricePoint
from app.domain.exceptions import AmmStatsInputError
from app.domain.services.real_price import calculate_display_price


class GetPoolPriceChartUseCase:
    def __init__(self, *, transactor: ReadTransactorPort):
        self._transactor = transactor

    async def execute(self, command: GetPoolPriceChartInput) -> list[PricePoint]:
        validate_pool_id(command.pool_id)
        validate_window(command.window)
        if command.resolution < 1:
            raise AmmStatsInputError("resolution must be a positive integer.")

        async with self._transactor.begin() as session:
            amounts = await session.pools.avg_amounts(
                command.pool_id,
                command.window,
                resolution=command.resolution,
            )
            snapshot = await session.pools.snapshot(command.pool_id)

        if snapshot is None:
            return []
        return [
            PricePoint(
                timestamp=amount.timestamp,
                price=calculate_display_price(
                    amount_x=amount.amount_x,
                    decimals_x=snapshot.locked_x.decimals,
                    amount_y=amount.amount_y,
                    decimals_y=snapshot.locked_y.decimals,
                ),
            )
            for amount in amounts
        ]
