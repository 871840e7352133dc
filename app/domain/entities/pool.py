from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.asset import AssetAmount


@dataclass(frozen=True)
class PoolSnapshot:
    id: str
    locked_x: AssetAmount
    locked_y: AssetAmount


@dataclass(frozen=True)
class PoolInfo:
    pool_id: str
    first_swap_timestamp: int


@dataclass(frozen=True)
class PoolVolumeSnapshot:
    pool_id: str
    volume_by_x: AssetAmount
    volume_by_y: AssetAmount


@dataclass(frozen=True)
class PoolFeesSnapshot:
    pool_id: str
    fees_by_x: AssetAmount
    fees_by_y: AssetAmount


@dataclass(frozen=True)
class PoolFeesAndVolumeSnapshot:
    pool_id: str
    volume_by_x: AssetAmount
    volume_by_y: AssetAmount
    fees_by_x: AssetAmount
    fees_by_y: AssetAmount

    def volume(self) -> PoolVolumeSnapshot:
        return PoolVolumeSnapshot(
            pool_id=self.pool_id,
            volume_by_x=self.volume_by_x,
            volume_by_y=self.volume_by_y,
        )

    def fees(self) -> PoolFeesSnapshot:
        return PoolFeesSnapshot(
            pool_id=self.pool_id,
            fees_by_x=self.fees_by_x,
            fees_by_y=self.fees_by_y,
        )


@dataclass(frozen=True)
class PoolTrace:
    id: str
    locked_x: AssetAmount
    locked_y: AssetAmount
    height: int
    gindex: int


@dataclass(frozen=True)
class TimestampedAmounts:
    timestamp: int
    amount_x: int
    amount_y: int


@dataclass(frozen=True)
class PoolBatchEntry:
    pool: PoolSnapshot
    info: PoolInfo
    fees: PoolFeesSnapshot | None
    volume: PoolVolumeSnapshot | None
