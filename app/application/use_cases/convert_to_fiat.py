from __future__ import annotations

from app.application.dto.amm_stats import ConvertToFiatInput
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.services.price_solver import PriceSolver
from app.domain.entities.asset import AssetAmount
from app.domain.entities.units import USD_UNITS, FiatEquiv, FiatUnits
from app.domain.exceptions import AmmStatsInputError


class ConvertToFiatUseCase:
    def __init__(
        self,
        *,
        transactor: ReadTransactorPort,
        price_solver: PriceSolver,
        units: FiatUnits = USD_UNITS,
    ):
        self._transactor = transactor
        self._price_solver = price_solver
        self._units = units

    async def execute(self, command: ConvertToFiatInput) -> FiatEquiv | None:
        if not command.token_id:
            raise AmmStatsInputError("token_id is required.")
        if command.amount < 0:
            raise AmmStatsInputError("amount must be non-negative.")

        async with self._transactor.begin() as session:
            asset_info = await session.pools.asset_by_id(command.token_id)
        if asset_info is None:
            return None

        asset = AssetAmount(
            id=asset_info.id,
            amount=command.amount * 10**asset_info.eval_decimals,
            ticker=asset_info.ticker,
            decimals=asset_info.decimals,
        )
        equiv = await self._price_solver.convert(asset, self._units)
        if equiv is None:
            return None
        return FiatEquiv(value=equiv.value, units=self._units)
