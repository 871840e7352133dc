from __future__ import annotations

from dataclasses import dataclass

from app.domain.entities.asset import AssetAmount


@dataclass(frozen=True)
class SwapVolumeRecord:
    num_txs: int
    asset: AssetAmount


@dataclass(frozen=True)
class DepositVolumeRecord:
    num_txs: int
    asset_x: AssetAmount
    asset_y: AssetAmount
