from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import assert_never

from app.application.ports.fiat_rates_port import FiatRatesPort
from app.application.ports.markets_port import MarketsPort
from app.domain.entities.asset import AssetAmount, AssetClass
from app.domain.entities.market import Market
from app.domain.entities.pool import PoolSnapshot
from app.domain.entities.units import (
    NATIVE_ASSET,
    AssetEquiv,
    CryptoUnits,
    FiatUnits,
    ValueUnits,
)


logger = logging.getLogger(__name__)


def markets_from_pools(pools: Sequence[PoolSnapshot], token_id: str) -> list[Market]:
    return [
        Market(x=pool.locked_x, y=pool.locked_y)
        for pool in pools
        if pool.locked_x.id == token_id or pool.locked_y.id == token_id
    ]


def select_market(markets: Sequence[Market], *, token_id: str, target_id: str) -> Market | None:
    """Deepest market pairing ``token_id`` with ``target_id``; ties keep input order."""
    best: Market | None = None
    for market in markets:
        if not (market.contains(token_id) and market.contains(target_id)):
            continue
        if best is None or market.depth_of(token_id) > best.depth_of(token_id):
            best = market
    return best


class CryptoPriceSolver:
    def __init__(self, *, markets_port: MarketsPort):
        self._markets_port = markets_port

    async def convert(
        self,
        asset: AssetAmount,
        target: CryptoUnits,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> AssetEquiv | None:
        if asset.id == target.token_id:
            return AssetEquiv(asset=asset, units=target, value=Decimal(asset.amount))

        if known_pools:
            markets = markets_from_pools(known_pools, asset.id)
        else:
            markets = await self._markets_port.get_by_asset(asset.id)
        market = select_market(markets, token_id=asset.id, target_id=target.token_id)
        if market is None:
            logger.debug(
                "price_solver: no market token=%s target=%s known_pools=%s",
                asset.id,
                target.token_id,
                len(known_pools),
            )
            return None
        value = Decimal(asset.amount) * market.price_by(asset.id)
        return AssetEquiv(asset=asset, units=target, value=value)


class FiatPriceSolver:
    """Converts to fiat by bridging through the native asset."""

    def __init__(
        self,
        *,
        crypto_solver: CryptoPriceSolver,
        rates_port: FiatRatesPort,
        bridge_asset: AssetClass = NATIVE_ASSET,
    ):
        self._crypto_solver = crypto_solver
        self._rates_port = rates_port
        self._bridge_asset = bridge_asset
        self._bridge_units = CryptoUnits(bridge_asset)

    async def convert(
        self,
        asset: AssetAmount,
        target: FiatUnits,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> AssetEquiv | None:
        bridge_equiv = await self._crypto_solver.convert(asset, self._bridge_units, known_pools)
        if bridge_equiv is None:
            return None
        rate = await self._rates_port.rate_of(self._bridge_asset, target)
        if rate is None:
            logger.warning(
                "price_solver: no fiat rate asset=%s currency=%s",
                self._bridge_asset.token_id,
                target.currency.id,
            )
            return None
        value = bridge_equiv.value * rate / (Decimal(10) ** target.currency.decimals)
        return AssetEquiv(asset=asset, units=target, value=value)


class PriceSolver:
    def __init__(self, *, crypto_solver: CryptoPriceSolver, fiat_solver: FiatPriceSolver):
        self.crypto = crypto_solver
        self.fiat = fiat_solver

    async def convert(
        self,
        asset: AssetAmount,
        target: ValueUnits,
        known_pools: Sequence[PoolSnapshot] = (),
    ) -> AssetEquiv | None:
        if isinstance(target, FiatUnits):
            return await self.fiat.convert(asset, target, known_pools)
        if isinstance(target, CryptoUnits):
            return await self.crypto.convert(asset, target, known_pools)
        assert_never(target)
