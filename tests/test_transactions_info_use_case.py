from __future__ import annotations

from decimal import Decimal
import unittest

from amm_fakes import NATIVE, FakeOrders, FakeTransactor, asset, make_fiat_solver
from app.application.dto.amm_stats import GetTransactionsInput
from app.application.use_cases.get_transactions_info import (
    GetDepositTransactionsUseCase,
    GetSwapTransactionsUseCase,
    summarize_transactions,
)
from app.domain.entities.market import Market
from app.domain.entities.orders import DepositVolumeRecord, SwapVolumeRecord
from app.domain.entities.units import USD_UNITS


MARKETS = [Market(x=asset("tkn", 500), y=asset(NATIVE, 1000))]


def _swaps(records) -> GetSwapTransactionsUseCase:
    return GetSwapTransactionsUseCase(
        transactor=FakeTransactor(orders=FakeOrders(swaps=records)),
        fiat_solver=make_fiat_solver(markets=MARKETS),
    )


def _deposits(records) -> GetDepositTransactionsUseCase:
    return GetDepositTransactionsUseCase(
        transactor=FakeTransactor(orders=FakeOrders(deposits=records)),
        fiat_solver=make_fiat_solver(markets=MARKETS),
    )


class TransactionsInfoUseCaseTests(unittest.IsolatedAsyncioTestCase):
    async def test_swaps_average_over_all_transactions(self):
        records = [
            SwapVolumeRecord(num_txs=4, asset=asset(NATIVE, 100)),
            SwapVolumeRecord(num_txs=4, asset=asset("tkn", 10)),
            SwapVolumeRecord(num_txs=4, asset=asset("unpriced", 5)),
        ]

        info = await _swaps(records).execute(GetTransactionsInput())

        self.assertEqual(info.num_txs, 4)
        self.assertEqual(info.avg_tx_value, Decimal("30.00"))
        self.assertEqual(info.max_tx_value, Decimal("100"))
        self.assertEqual(info.units, USD_UNITS)

    async def test_deposits_need_both_sides_priced(self):
        records = [
            DepositVolumeRecord(num_txs=3, asset_x=asset(NATIVE, 100), asset_y=asset("tkn", 10)),
            DepositVolumeRecord(num_txs=3, asset_x=asset(NATIVE, 50), asset_y=asset("unpriced", 1)),
        ]

        info = await _deposits(records).execute(GetTransactionsInput())

        self.assertEqual(info.num_txs, 3)
        self.assertEqual(info.avg_tx_value, Decimal("40.00"))
        self.assertEqual(info.max_tx_value, Decimal("120"))

    async def test_no_deposits_is_all_zero(self):
        info = await _deposits([]).execute(GetTransactionsInput())

        self.assertEqual(info.num_txs, 0)
        self.assertEqual(info.avg_tx_value, Decimal("0"))
        self.assertEqual(info.max_tx_value, Decimal("0"))

    async def test_unpriced_swaps_leave_max_at_zero(self):
        records = [SwapVolumeRecord(num_txs=2, asset=asset("unpriced", 5))]

        info = await _swaps(records).execute(GetTransactionsInput())

        self.assertEqual(info.num_txs, 2)
        self.assertEqual(info.avg_tx_value, Decimal("0.00"))
        self.assertEqual(info.max_tx_value, Decimal("0"))


def test_summarize_rounds_average_to_currency_decimals():
    info = summarize_transactions(3, [Decimal("10"), Decimal("0.01")], USD_UNITS)
    assert info.avg_tx_value == Decimal("3.34")


def test_summarize_without_transactions_is_empty():
    info = summarize_transactions(0, [Decimal("5")], USD_UNITS)
    assert info.num_txs == 0
    assert info.max_tx_value == Decimal("0")
