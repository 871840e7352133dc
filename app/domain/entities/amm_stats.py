from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.asset import AssetAmount
from app.domain.entities.time_window import TimeWindow
from app.domain.entities.units import ValueUnits
from app.domain.services.decimals import round_to_scale


@dataclass(frozen=True)
class TotalValueLocked:
    value: Decimal
    units: ValueUnits


@dataclass(frozen=True)
class Volume:
    value: Decimal
    units: ValueUnits
    window: TimeWindow

    @classmethod
    def empty(cls, units: ValueUnits, window: TimeWindow) -> Volume:
        return cls(value=Decimal("0"), units=units, window=window)


@dataclass(frozen=True)
class Fees:
    value: Decimal
    units: ValueUnits
    window: TimeWindow

    @classmethod
    def empty(cls, units: ValueUnits, window: TimeWindow) -> Fees:
        return cls(value=Decimal("0"), units=units, window=window)


@dataclass(frozen=True)
class PlatformSummary:
    tvl: TotalValueLocked
    volume: Volume


@dataclass(frozen=True)
class PoolStats:
    pool_id: str
    locked_x: AssetAmount
    locked_y: AssetAmount
    tvl: TotalValueLocked
    volume: Volume
    fees: Fees
    yearly_fees_percent: Decimal


@dataclass(frozen=True)
class PoolSummary:
    base_id: str
    base_symbol: str | None
    base_name: str | None
    quote_id: str
    quote_symbol: str | None
    quote_name: str | None
    last_price: Decimal
    base_volume: Decimal
    quote_volume: Decimal


SLIPPAGE_SCALE = 2
PRICE_SCALE = 6


@dataclass(frozen=True)
class PoolSlippage:
    value: Decimal

    @classmethod
    def zero(cls) -> PoolSlippage:
        return cls(value=Decimal("0")).scaled()

    def scaled(self, scale: int = SLIPPAGE_SCALE) -> PoolSlippage:
        return PoolSlippage(value=round_to_scale(self.value, scale))


@dataclass(frozen=True)
class PricePoint:
    timestamp: int
    price: Decimal


@dataclass(frozen=True)
class TransactionsInfo:
    num_txs: int
    avg_tx_value: Decimal
    max_tx_value: Decimal
    units: ValueUnits

    @classmethod
    def empty(cls, units: ValueUnits) -> TransactionsInfo:
        return cls(
            num_txs=0,
            avg_tx_value=Decimal("0"),
            max_tx_value=Decimal("0"),
            units=units,
        )
