from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from app.domain.entities.asset import AssetAmount


@dataclass(frozen=True)
class Market:
    x: AssetAmount
    y: AssetAmount

    def contains(self, token_id: str) -> bool:
        return self.x.id == token_id or self.y.id == token_id

    def counter_asset(self, token_id: str) -> AssetAmount:
        return self.y if self.x.id == token_id else self.x

    def depth_of(self, token_id: str) -> int:
        if self.x.id == token_id:
            return self.x.amount
        if self.y.id == token_id:
            return self.y.amount
        return 0

    def price_by(self, token_id: str) -> Decimal:
        """Base units of the counter asset per base unit of ``token_id``."""
        if self.x.id == token_id:
            base, quote = self.x.amount, self.y.amount
        else:
            base, quote = self.y.amount, self.x.amount
        if base == 0:
            return Decimal("0")
        return Decimal(quote) / Decimal(base)
