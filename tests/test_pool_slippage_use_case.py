from __future__ import annotations

from decimal import Decimal
import unittest

import pytest

from amm_fakes import FakeNetwork, FakePools, FakeTransactor, trace
from app.application.dto.amm_stats import GetPoolSlippageInput
from app.application.use_cases.get_pool_slippage import GetPoolSlippageUseCase
from app.domain.entities.pool import PoolInfo
from app.domain.exceptions import AmmStatsInputError


def _use_case(pools: FakePools, *, height: int = 500) -> GetPoolSlippageUseCase:
    return GetPoolSlippageUseCase(
        transactor=FakeTransactor(pools=pools),
        network=FakeNetwork(height),
        bucket_width=2,
    )


def _pools(**kwargs) -> FakePools:
    return FakePools(infos={"p1": PoolInfo(pool_id="p1", first_swap_timestamp=0)}, **kwargs)


class PoolSlippageUseCaseTests(unittest.IsolatedAsyncioTestCase):
    async def test_single_bucket_against_anchor(self):
        pools = _pools(
            anchor=trace(8, 0, 100, 200),
            traces=[trace(10, 1, 100, 210), trace(11, 2, 100, 220)],
        )

        result = await _use_case(pools).execute(GetPoolSlippageInput(pool_id="p1", depth=2))

        self.assertEqual(result.value, Decimal("10.00"))
        self.assertEqual(result.value.as_tuple().exponent, -2)

    async def test_average_across_buckets_is_rounded(self):
        pools = _pools(
            traces=[
                trace(10, 1, 100, 200),
                trace(10, 2, 100, 210),
                trace(12, 3, 100, 210),
                trace(12, 4, 100, 231),
            ],
        )

        result = await _use_case(pools).execute(GetPoolSlippageInput(pool_id="p1", depth=4))

        # (5 + 10) / 2
        self.assertEqual(result.value, Decimal("7.50"))

    async def test_reads_traces_below_current_height(self):
        pools = _pools(traces=[trace(10, 1, 100, 200)])

        await _use_case(pools, height=777).execute(GetPoolSlippageInput(pool_id="p1", depth=5))

        self.assertIn("trace:p1:5:777", pools.calls)
        self.assertIn("prev_trace:p1:5:777", pools.calls)

    async def test_known_pool_without_traces_is_zero(self):
        result = await _use_case(_pools()).execute(GetPoolSlippageInput(pool_id="p1", depth=20))

        self.assertEqual(result.value, Decimal("0.00"))
        self.assertEqual(result.value.as_tuple().exponent, -2)

    async def test_unknown_pool_is_none(self):
        pools = FakePools(traces=[trace(10, 1, 100, 200)])

        self.assertIsNone(await _use_case(pools).execute(GetPoolSlippageInput(pool_id="p1", depth=20)))

    async def test_rejects_non_positive_depth(self):
        with self.assertRaises(AmmStatsInputError):
            await _use_case(_pools()).execute(GetPoolSlippageInput(pool_id="p1", depth=0))


def test_rejects_non_positive_bucket_width():
    with pytest.raises(ValueError):
        GetPoolSlippageUseCase(transactor=FakeTransactor(), network=FakeNetwork(1), bucket_width=0)
