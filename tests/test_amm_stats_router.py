from __future__ import annotations

from decimal import Decimal

from fastapi.testclient import TestClient

from app.api.deps import (
    get_convert_to_fiat_use_case,
    get_deposit_transactions_use_case,
    get_platform_summary_use_case,
    get_pool_price_chart_use_case,
    get_pool_slippage_use_case,
    get_pool_stats_use_case,
    get_pools_stats_v2_use_case,
)
from app.domain.entities.amm_stats import (
    Fees,
    PlatformSummary,
    PoolSlippage,
    PoolStats,
    PricePoint,
    TotalValueLocked,
    TransactionsInfo,
    Volume,
)
from app.domain.entities.asset import AssetAmount
from app.domain.entities.time_window import TimeWindow
from app.domain.entities.units import USD_UNITS, FiatEquiv
from app.domain.exceptions import AmmStatsInputError
from app.main import app


class FakePlatformSummaryUseCase:
    def __init__(self):
        self.commands = []

    async def execute(self, command):
        self.commands.append(command)
        if command.window.from_ms is not None and command.window.to_ms is not None:
            if command.window.from_ms > command.window.to_ms:
                raise AmmStatsInputError("from must not be after to.")
        return PlatformSummary(
            tvl=TotalValueLocked(value=Decimal("2300.004"), units=USD_UNITS),
            volume=Volume(value=Decimal("70"), units=USD_UNITS, window=command.window),
        )


def _pool_stats(window: TimeWindow) -> PoolStats:
    return PoolStats(
        pool_id="p1",
        locked_x=AssetAmount(id="x", amount=1000, ticker="ERG", decimals=9),
        locked_y=AssetAmount(id="y", amount=500, ticker="TKN", decimals=0),
        tvl=TotalValueLocked(value=Decimal("2000"), units=USD_UNITS),
        volume=Volume(value=Decimal("600"), units=USD_UNITS, window=window),
        fees=Fees(value=Decimal("4"), units=USD_UNITS, window=window),
        yearly_fees_percent=Decimal("73.00"),
    )


class FakePoolStatsUseCase:
    async def execute(self, command):
        if command.pool_id != "p1":
            return None
        return _pool_stats(command.window)


class FakePoolsStatsUseCase:
    async def execute(self, command):
        return [_pool_stats(command.window)]


class FakeSlippageUseCase:
    async def execute(self, command):
        if command.depth < 1:
            raise AmmStatsInputError("depth must be a positive integer.")
        if command.pool_id == "quiet":
            return PoolSlippage.zero()
        if command.pool_id != "p1":
            return None
        return PoolSlippage(value=Decimal("12.50"))


class FakeChartUseCase:
    def __init__(self):
        self.commands = []

    async def execute(self, command):
        self.commands.append(command)
        return [PricePoint(timestamp=1000, price=Decimal("5.000000"))]


class FakeDepositsUseCase:
    async def execute(self, _command):
        return TransactionsInfo.empty(USD_UNITS)


class FakeConvertUseCase:
    async def execute(self, command):
        if command.token_id != "tkn":
            return None
        return FiatEquiv(value=Decimal("600.123"), units=USD_UNITS)


def test_platform_stats_rounds_fiat_values_and_echoes_window():
    use_case = FakePlatformSummaryUseCase()
    app.dependency_overrides[get_platform_summary_use_case] = lambda: use_case

    client = TestClient(app)
    response = client.get("/v1/amm/platform/stats", params={"from": 10, "to": 20})

    assert response.status_code == 200
    payload = response.json()
    assert payload["tvl"]["value"] == "2300.00"
    assert payload["tvl"]["units"] == {"currency": "USD", "token_id": None, "decimals": 2}
    assert payload["volume"]["value"] == "70.00"
    assert payload["volume"]["window"] == {"from_ms": 10, "to_ms": 20}
    assert use_case.commands[0].window == TimeWindow(from_ms=10, to_ms=20)

    app.dependency_overrides.clear()


def test_platform_stats_rejects_inverted_window():
    app.dependency_overrides[get_platform_summary_use_case] = lambda: FakePlatformSummaryUseCase()

    client = TestClient(app)
    response = client.get("/v1/amm/platform/stats", params={"from": 20, "to": 10})

    assert response.status_code == 400

    app.dependency_overrides.clear()


def test_pool_stats_returns_pool_or_404():
    app.dependency_overrides[get_pool_stats_use_case] = lambda: FakePoolStatsUseCase()

    client = TestClient(app)
    found = client.get("/v1/amm/pool/p1/stats")
    missing = client.get("/v1/amm/pool/nope/stats")

    assert found.status_code == 200
    payload = found.json()
    assert payload["id"] == "p1"
    assert payload["locked_x"]["amount"] == 1000
    assert payload["tvl"]["value"] == "2000.00"
    assert payload["fees"]["value"] == "4.00"
    assert payload["yearly_fees_percent"] == "73.00"
    assert missing.status_code == 404

    app.dependency_overrides.clear()


def test_pools_stats_v2_lists_pools():
    app.dependency_overrides[get_pools_stats_v2_use_case] = lambda: FakePoolsStatsUseCase()

    client = TestClient(app)
    response = client.get("/v2/amm/pools/stats")

    assert response.status_code == 200
    assert [row["id"] for row in response.json()] == ["p1"]

    app.dependency_overrides.clear()


def test_slippage_statuses():
    app.dependency_overrides[get_pool_slippage_use_case] = lambda: FakeSlippageUseCase()

    client = TestClient(app)
    found = client.get("/v1/amm/pool/p1/slippage", params={"depth": 5})
    missing = client.get("/v1/amm/pool/nope/slippage")
    invalid = client.get("/v1/amm/pool/p1/slippage", params={"depth": 0})
    quiet = client.get("/v1/amm/pool/quiet/slippage")

    assert found.status_code == 200
    assert found.json() == {"slippage_percent": "12.50"}
    assert quiet.json() == {"slippage_percent": "0.00"}
    assert missing.status_code == 404
    assert invalid.status_code == 400

    app.dependency_overrides.clear()


def test_chart_passes_resolution():
    use_case = FakeChartUseCase()
    app.dependency_overrides[get_pool_price_chart_use_case] = lambda: use_case

    client = TestClient(app)
    response = client.get("/v1/amm/pool/p1/chart", params={"resolution": 15})

    assert response.status_code == 200
    assert response.json() == [{"timestamp": 1000, "price": "5.000000"}]
    assert use_case.commands[0].resolution == 15

    app.dependency_overrides.clear()


def test_empty_deposits_are_zero():
    app.dependency_overrides[get_deposit_transactions_use_case] = lambda: FakeDepositsUseCase()

    client = TestClient(app)
    response = client.get("/v1/amm/deposits")

    assert response.status_code == 200
    payload = response.json()
    assert payload["num_txs"] == 0
    assert Decimal(payload["avg_tx_value"]) == 0
    assert Decimal(payload["max_tx_value"]) == 0

    app.dependency_overrides.clear()


def test_convert_returns_value_or_404():
    app.dependency_overrides[get_convert_to_fiat_use_case] = lambda: FakeConvertUseCase()

    client = TestClient(app)
    found = client.get("/v1/amm/convert/tkn", params={"amount": 3})
    missing = client.get("/v1/amm/convert/nope", params={"amount": 3})

    assert found.status_code == 200
    assert found.json()["value"] == "600.12"
    assert missing.status_code == 404

    app.dependency_overrides.clear()
