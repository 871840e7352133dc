from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.entities.time_window import TimeWindow


@dataclass(frozen=True)
class GetPlatformSummaryInput:
    window: TimeWindow = field(default_factory=TimeWindow.unbounded)


@dataclass(frozen=True)
class GetPoolsStatsInput:
    window: TimeWindow = field(default_factory=TimeWindow.unbounded)


@dataclass(frozen=True)
class GetPoolStatsInput:
    pool_id: str
    window: TimeWindow = field(default_factory=TimeWindow.unbounded)


@dataclass(frozen=True)
class GetPoolSlippageInput:
    pool_id: str
    depth: int


@dataclass(frozen=True)
class GetPoolPriceChartInput:
    pool_id: str
    window: TimeWindow
    resolution: int


@dataclass(frozen=True)
class GetTransactionsInput:
    window: TimeWindow = field(default_factory=TimeWindow.unbounded)


@dataclass(frozen=True)
class ConvertToFiatInput:
    token_id: str
    amount: int
