from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AssetAmount:
    id: str
    amount: int
    ticker: str | None = None
    decimals: int | None = None

    @property
    def eval_decimals(self) -> int:
        return self.decimals if self.decimals is not None else 0

    def with_amount(self, amount: int) -> AssetAmount:
        return AssetAmount(id=self.id, amount=amount, ticker=self.ticker, decimals=self.decimals)


@dataclass(frozen=True)
class AssetClass:
    token_id: str
    ticker: str | None = None
    decimals: int | None = None


@dataclass(frozen=True)
class AssetInfo:
    id: str
    ticker: str | None
    decimals: int | None

    @property
    def eval_decimals(self) -> int:
        return self.decimals if self.decimals is not None else 0
