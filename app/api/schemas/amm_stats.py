from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel


class UnitsResponse(BaseModel):
    currency: str | None = None
    token_id: str | None = None
    decimals: int


class TimeWindowResponse(BaseModel):
    from_ms: int | None
    to_ms: int | None


class AssetAmountResponse(BaseModel):
    id: str
    amount: int
    ticker: str | None
    decimals: int | None


class TotalValueLockedResponse(BaseModel):
    value: Decimal
    units: UnitsResponse


class VolumeResponse(BaseModel):
    value: Decimal
    units: UnitsResponse
    window: TimeWindowResponse


class FeesResponse(BaseModel):
    value: Decimal
    units: UnitsResponse
    window: TimeWindowResponse


class PlatformSummaryResponse(BaseModel):
    tvl: TotalValueLockedResponse
    volume: VolumeResponse


class PoolStatsResponse(BaseModel):
    id: str
    locked_x: AssetAmountResponse
    locked_y: AssetAmountResponse
    tvl: TotalValueLockedResponse
    volume: VolumeResponse
    fees: FeesResponse
    yearly_fees_percent: Decimal


class PoolSummaryResponse(BaseModel):
    base_id: str
    base_symbol: str | None
    base_name: str | None
    quote_id: str
    quote_symbol: str | None
    quote_name: str | None
    last_price: Decimal
    base_volume: Decimal
    quote_volume: Decimal


class PoolSlippageResponse(BaseModel):
    slippage_percent: Decimal


class PricePointResponse(BaseModel):
    timestamp: int
    price: Decimal


class TransactionsInfoResponse(BaseModel):
    num_txs: int
    avg_tx_value: Decimal
    max_tx_value: Decimal
    units: UnitsResponse


class FiatEquivResponse(BaseModel):
    value: Decimal
    units: UnitsResponse
