from __future__ import annotations

from decimal import Decimal

from app.application.dto.amm_stats import GetTransactionsInput
from app.application.ports.read_transactor_port import ReadTransactorPort
from app.application.services.price_solver import FiatPriceSolver
from app.application.use_cases.amm_stats_common import validate_window
from app.domain.entities.amm_stats import TransactionsInfo
from app.domain.entities.orders import DepositVolumeRecord, SwapVolumeRecord
from app.domain.entities.units import USD_UNITS, FiatUnits
from app.domain.services.decimals import round_to_scale


def summarize_transactions(num_txs: int, values: list[Decimal], units: FiatUnits) -> TransactionsInfo:
    if num_txs <= 0:
        return TransactionsInfo.empty(units)
    total = sum(values, Decimal("0"))
    return TransactionsInfo(
        num_txs=num_txs,
        avg_tx_value=round_to_scale(total / Decimal(num_txs), units.currency.decimals),
        max_tx_value=max(values, default=Decimal("0")),
        units=units,
    )


class GetSwapTransactionsUseCase:
    def __init__(
        self,
        *,
        transactor: ReadTransactorPort,
        fiat_solver: FiatPriceSolver,
        units: FiatUnits = USD_UNITS,
    ):
        self._transactor = transactor
        self._fiat_solver = fiat_solver
        self._units = units

    async def execute(self, command: GetTransactionsInput) -> TransactionsInfo:
        validate_window(command.window)
        async with self._transactor.begin() as session:
            swaps = await session.orders.get_swap_txs(command.window)
        if not swaps:
            return TransactionsInfo.empty(self._units)

        values = []
        for swap in swaps:
            value = await self._swap_value(swap)
            if value is not None:
                values.append(value)
        return summarize_transactions(swaps[0].num_txs, values, self._units)

    async def _swap_value(self, swap: SwapVolumeRecord) -> Decimal | None:
        equiv = await self._fiat_solver.convert(swap.asset, self._units)
        return equiv.value if equiv is not None else None


class GetDepositTransactionsUseCase:
    def __init__(
        self,
        *,
        transactor: ReadTransactorPort,
        fiat_solver: FiatPriceSolver,
        units: FiatUnits = USD_UNITS,
    ):
        self._transactor = transactor
        self._fiat_solver = fiat_solver
        self._units = units

    async def execute(self, command: GetTransactionsInput) -> TransactionsInfo:
        validate_window(command.window)
        async with self._transactor.begin() as session:
            deposits = await session.orders.get_deposit_txs(command.window)
        if not deposits:
            return TransactionsInfo.empty(self._units)

        values = []
        for deposit in deposits:
            value = await self._deposit_value(deposit)
            if value is not None:
                values.append(value)
        return summarize_transactions(deposits[0].num_txs, values, self._units)

    async def _deposit_value(self, deposit: DepositVolumeRecord) -> Decimal | None:
        # Both sides must price; a half-priced deposit is dropped.
        equiv_x = await self._fiat_solver.convert(deposit.asset_x, self._units)
        if equiv_x is None:
            return None
        equiv_y = await self._fiat_solver.convert(deposit.asset_y, self._units)
        if equiv_y is None:
            return None
        return equiv_x.value + equiv_y.value
