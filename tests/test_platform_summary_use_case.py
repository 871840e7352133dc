from __future__ import annotations

from decimal import Decimal
import unittest

from amm_fakes import (
    NATIVE,
    FakePools,
    FakeTokenFetcher,
    FakeTransactor,
    asset,
    make_fiat_solver,
    native_pool,
    pool,
)
from app.application.dto.amm_stats import GetPlatformSummaryInput
from app.application.use_cases.get_platform_summary import GetPlatformSummaryUseCase
from app.domain.entities.market import Market
from app.domain.entities.pool import PoolVolumeSnapshot
from app.domain.entities.time_window import TimeWindow
from app.domain.entities.units import USD_UNITS
from app.domain.exceptions import AmmStatsInputError


TKN_MARKET = Market(x=asset("tkn", 500), y=asset(NATIVE, 1000))
ALLOWED = {NATIVE, "tkn", "orphan"}


def _pools(native_reserve: int = 1000) -> FakePools:
    return FakePools(
        snapshots_list=[
            native_pool("p1", native_reserve, "tkn", 500),
            native_pool("p2", 10_000, "spam", 1),
            native_pool("p3", 300, "orphan", 5),
        ],
        volumes_by_pool={
            "p1": PoolVolumeSnapshot("p1", asset(NATIVE, 50), asset("tkn", 10)),
            "p2": PoolVolumeSnapshot("p2", asset(NATIVE, 7_000), asset("spam", 1)),
        },
    )


def _use_case(pools: FakePools, tokens=ALLOWED) -> tuple[GetPlatformSummaryUseCase, FakeTransactor]:
    transactor = FakeTransactor(pools=pools)
    use_case = GetPlatformSummaryUseCase(
        transactor=transactor,
        token_fetcher=FakeTokenFetcher(tokens),
        fiat_solver=make_fiat_solver(markets=[TKN_MARKET]),
    )
    return use_case, transactor


class PlatformSummaryUseCaseTests(unittest.IsolatedAsyncioTestCase):
    async def test_sums_allowed_pools_and_tolerates_unpriced_sides(self):
        use_case, transactor = _use_case(_pools())
        window = TimeWindow(from_ms=1, to_ms=2)

        summary = await use_case.execute(GetPlatformSummaryInput(window=window))

        # p1: 1000 + 500 tkn * 2; p3: native side only; p2 is not allow-listed.
        self.assertEqual(summary.tvl.value, Decimal("2300"))
        self.assertEqual(summary.tvl.units, USD_UNITS)
        self.assertEqual(summary.volume.value, Decimal("70"))
        self.assertEqual(summary.volume.window, window)
        self.assertEqual(transactor.transactions, 1)

    async def test_tvl_grows_with_reserves(self):
        small, _ = _use_case(_pools(native_reserve=1000))
        large, _ = _use_case(_pools(native_reserve=1500))

        small_summary = await small.execute(GetPlatformSummaryInput())
        large_summary = await large.execute(GetPlatformSummaryInput())

        self.assertGreater(large_summary.tvl.value, small_summary.tvl.value)

    async def test_empty_store_is_zero(self):
        use_case, _ = _use_case(FakePools())

        summary = await use_case.execute(GetPlatformSummaryInput())

        self.assertEqual(summary.tvl.value, Decimal("0"))
        self.assertEqual(summary.volume.value, Decimal("0"))

    async def test_pool_with_one_disallowed_asset_is_dropped_entirely(self):
        pools = FakePools(snapshots_list=[pool("p9", asset(NATIVE, 100), asset("tkn", 5))])
        use_case, _ = _use_case(pools, tokens={"tkn"})

        summary = await use_case.execute(GetPlatformSummaryInput())

        self.assertEqual(summary.tvl.value, Decimal("0"))

    async def test_rejects_inverted_window(self):
        use_case, _ = _use_case(_pools())

        with self.assertRaises(AmmStatsInputError):
            await use_case.execute(GetPlatformSummaryInput(window=TimeWindow(from_ms=5, to_ms=1)))
