from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from app.domain.entities.asset import AssetAmount, AssetInfo
from app.domain.entities.orders import DepositVolumeRecord, SwapVolumeRecord
from app.domain.entities.pool import (
    PoolFeesAndVolumeSnapshot,
    PoolFeesSnapshot,
    PoolInfo,
    PoolSnapshot,
    PoolTrace,
    PoolVolumeSnapshot,
    TimestampedAmounts,
)


def _int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, int):
        return value
    return int(Decimal(str(value)))


def _optional_int(value: Any) -> int | None:
    return int(value) if value is not None else None


def _optional_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def map_asset(row: Mapping[str, Any], prefix: str, *, amount_key: str | None = None) -> AssetAmount:
    return AssetAmount(
        id=str(row[f"{prefix}_id"]),
        amount=_int(row[amount_key or f"{prefix}_amount"]),
        ticker=_optional_str(row.get(f"{prefix}_ticker")),
        decimals=_optional_int(row.get(f"{prefix}_decimals")),
    )


def map_row_to_pool_snapshot(row: Mapping[str, Any]) -> PoolSnapshot:
    return PoolSnapshot(
        id=str(row["pool_id"]),
        locked_x=map_asset(row, "x"),
        locked_y=map_asset(row, "y"),
    )


def map_row_to_pool_trace(row: Mapping[str, Any]) -> PoolTrace:
    return PoolTrace(
        id=str(row["pool_id"]),
        locked_x=map_asset(row, "x"),
        locked_y=map_asset(row, "y"),
        height=int(row["height"]),
        gindex=int(row["gindex"]),
    )


def map_row_to_pool_info(row: Mapping[str, Any]) -> PoolInfo:
    return PoolInfo(
        pool_id=str(row["pool_id"]),
        first_swap_timestamp=int(row["first_swap_timestamp"]),
    )


def map_row_to_pool_volume(row: Mapping[str, Any]) -> PoolVolumeSnapshot:
    return PoolVolumeSnapshot(
        pool_id=str(row["pool_id"]),
        volume_by_x=map_asset(row, "x", amount_key="volume_x"),
        volume_by_y=map_asset(row, "y", amount_key="volume_y"),
    )


def map_row_to_pool_fees(row: Mapping[str, Any]) -> PoolFeesSnapshot:
    return PoolFeesSnapshot(
        pool_id=str(row["pool_id"]),
        fees_by_x=map_asset(row, "x", amount_key="fees_x"),
        fees_by_y=map_asset(row, "y", amount_key="fees_y"),
    )


def map_row_to_pool_fees_and_volume(row: Mapping[str, Any]) -> PoolFeesAndVolumeSnapshot:
    return PoolFeesAndVolumeSnapshot(
        pool_id=str(row["pool_id"]),
        volume_by_x=map_asset(row, "x", amount_key="volume_x"),
        volume_by_y=map_asset(row, "y", amount_key="volume_y"),
        fees_by_x=map_asset(row, "x", amount_key="fees_x"),
        fees_by_y=map_asset(row, "y", amount_key="fees_y"),
    )


def map_row_to_timestamped_amounts(row: Mapping[str, Any]) -> TimestampedAmounts:
    return TimestampedAmounts(
        timestamp=int(row["timestamp"]),
        amount_x=_int(row["amount_x"]),
        amount_y=_int(row["amount_y"]),
    )


def map_row_to_asset_info(row: Mapping[str, Any]) -> AssetInfo:
    return AssetInfo(
        id=str(row["id"]),
        ticker=_optional_str(row.get("ticker")),
        decimals=_optional_int(row.get("decimals")),
    )


def map_row_to_swap_volume(row: Mapping[str, Any]) -> SwapVolumeRecord:
    return SwapVolumeRecord(
        num_txs=int(row["num_txs"]),
        asset=map_asset(row, "input"),
    )


def map_row_to_deposit_volume(row: Mapping[str, Any]) -> DepositVolumeRecord:
    return DepositVolumeRecord(
        num_txs=int(row["num_txs"]),
        asset_x=map_asset(row, "x"),
        asset_y=map_asset(row, "y"),
    )
