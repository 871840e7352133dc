from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from app.domain.entities.asset import AssetClass
from app.domain.entities.units import FiatUnits


class FiatRatesPort(Protocol):
    async def rate_of(self, asset: AssetClass, units: FiatUnits) -> Decimal | None:
        """Minor units of the fiat currency per base unit of ``asset``."""
        ...
