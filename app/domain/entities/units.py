from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from app.domain.entities.asset import AssetAmount, AssetClass


NATIVE_TOKEN_ID = "0000000000000000000000000000000000000000000000000000000000000000"
NATIVE_TICKER = "ERG"
NATIVE_DECIMALS = 9


@dataclass(frozen=True)
class Currency:
    id: str
    decimals: int


@dataclass(frozen=True)
class FiatUnits:
    currency: Currency


@dataclass(frozen=True)
class CryptoUnits:
    asset: AssetClass

    @property
    def token_id(self) -> str:
        return self.asset.token_id


ValueUnits = Union[CryptoUnits, FiatUnits]

USD_UNITS = FiatUnits(Currency(id="USD", decimals=2))
NATIVE_ASSET = AssetClass(token_id=NATIVE_TOKEN_ID, ticker=NATIVE_TICKER, decimals=NATIVE_DECIMALS)
NATIVE_UNITS = CryptoUnits(NATIVE_ASSET)


def units_decimals(units: ValueUnits) -> int:
    if isinstance(units, FiatUnits):
        return units.currency.decimals
    return units.asset.decimals if units.asset.decimals is not None else 0


@dataclass(frozen=True)
class AssetEquiv:
    asset: AssetAmount
    units: ValueUnits
    value: Decimal


@dataclass(frozen=True)
class FiatEquiv:
    value: Decimal
    units: FiatUnits
