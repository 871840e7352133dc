from __future__ import annotations

import logging
from decimal import Decimal

from app.application.dto.amm_stats import GetPlatformSummaryInput
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.ports.token_fetcher_port import TokenFetcherPort
from app.application.services.price_solver import FiatPriceSolver
from app.application.use_cases.amm_stats_common import validate_window
from app.domain.entities.amm_stats import PlatformSummary, TotalValueLocked, Volume
from app.domain.entities.asset import AssetAmount
from app.domain.entities.units import USD_UNITS, FiatUnits


logger = logging.getLogger(__name__)


class GetPlatformSummaryUseCase:
    def __init__(
        self,
        *,
        transactor: ReadTransactorPort,
        token_fetcher: TokenFetcherPort,
        fiat_solver: FiatPriceSolver,
        units: FiatUnits = USD_UNITS,
    ):
        self._transactor = transactor
        self._token_fetcher = token_fetcher
        self._fiat_solver = fiat_solver
        self._units = units

    async def execute(self, command: GetPlatformSummaryInput) -> PlatformSummary:
        validate_window(command.window)

        async with self._transactor.begin() as session:
            snapshots = await session.pools.snapshots()
            volumes = await session.pools.volumes(command.window)
        valid_tokens = await self._token_fetcher.fetch_tokens()

        locked = [
            side
            for pool in snapshots
            if pool.locked_x.id in valid_tokens and pool.locked_y.id in valid_tokens
            for side in (pool.locked_x, pool.locked_y)
        ]
        traded = [
            side
            for vol in volumes
            if vol.volume_by_x.id in valid_tokens and vol.volume_by_y.id in valid_tokens
            for side in (vol.volume_by_x, vol.volume_by_y)
        ]
        logger.debug(
            "amm_stats: platform summary pools=%s allowed_sides=%s volume_sides=%s",
            len(snapshots),
            len(locked),
            len(traded),
        )

        tvl_value = await self._sum_converted(locked)
        volume_value = await self._sum_converted(traded)
        return PlatformSummary(
            tvl=TotalValueLocked(value=tvl_value, units=self._units),
            volume=Volume(value=volume_value, units=self._units, window=command.window),
        )

    async def _sum_converted(self, assets: list[AssetAmount]) -> Decimal:
        total = Decimal("0")
        for asset in assets:
            equiv = await self._fiat_solver.convert(asset, self._units)
            if equiv is not None:
                total += equiv.value
        return total
