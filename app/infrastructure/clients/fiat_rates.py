from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from decimal import Decimal
from threading import Lock

import httpx

from app.application.ports.fiat_rates_port import FiatRatesPort
from app.domain.entities.asset import AssetClass
from app.domain.entities.units import FiatUnits


logger = logging.getLogger(__name__)


class FiatRateLookupError(RuntimeError):
    pass


def _normalize_currency(value: str) -> str:
    return value.strip().lower()


@dataclass(frozen=True)
class FiatRateOverrides:
    """Whole-unit prices keyed by currency, e.g. ``{"usd": "1.25"}``."""

    data: dict

    def __post_init__(self):
        data = self.data if isinstance(self.data, dict) else {}
        normalized = {_normalize_currency(str(key)): value for key, value in data.items()}
        object.__setattr__(self, "data", normalized)

    def get_price(self, currency: str) -> Decimal | None:
        value = self.data.get(_normalize_currency(currency))
        if value is None:
            return None
        return Decimal(str(value))


def to_minor_units_rate(*, whole_unit_price: Decimal, asset_decimals: int, fiat_decimals: int) -> Decimal:
    """Fiat minor units per asset base unit, from a fiat-per-whole-asset price."""
    return whole_unit_price * (Decimal(10) ** fiat_decimals) / (Decimal(10) ** asset_decimals)


class CoingeckoFiatRatesClient(FiatRatesPort):
    def __init__(
        self,
        *,
        api_base: str,
        timeout_seconds: float,
        coin_ids: dict[str, str],
        overrides: FiatRateOverrides | None = None,
        cache_ttl_seconds: float = 300,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self.cache_ttl_seconds = cache_ttl_seconds
        self._coin_ids = coin_ids
        self._overrides = overrides or FiatRateOverrides({})
        self._transport = transport
        self._cache: dict[tuple[str, str], tuple[float, Decimal]] = {}
        self._lock = Lock()

    def _cache_get(self, *, coin_id: str, currency: str) -> Decimal | None:
        if self.cache_ttl_seconds <= 0:
            return None
        key = (coin_id, currency)
        now = time.monotonic()
        with self._lock:
            cached = self._cache.get(key)
            if cached is None:
                return None
            expires_at, value = cached
            if expires_at <= now:
                self._cache.pop(key, None)
                return None
            return value

    def _cache_set(self, *, coin_id: str, currency: str, value: Decimal) -> None:
        if self.cache_ttl_seconds <= 0:
            return
        expires_at = time.monotonic() + self.cache_ttl_seconds
        with self._lock:
            self._cache[(coin_id, currency)] = (expires_at, value)

    async def rate_of(self, asset: AssetClass, units: FiatUnits) -> Decimal | None:
        currency = _normalize_currency(units.currency.id)
        whole_unit_price = await self._whole_unit_price(asset, currency)
        if whole_unit_price is None:
            return None
        return to_minor_units_rate(
            whole_unit_price=whole_unit_price,
            asset_decimals=asset.decimals or 0,
            fiat_decimals=units.currency.decimals,
        )

    async def _whole_unit_price(self, asset: AssetClass, currency: str) -> Decimal | None:
        override = self._overrides.get_price(currency)
        if override is not None:
            return override

        coin_id = self._coin_ids.get(asset.token_id)
        if not coin_id:
            logger.warning("fiat_rates_client: no coin id for token=%s", asset.token_id)
            return None

        cached = self._cache_get(coin_id=coin_id, currency=currency)
        if cached is not None:
            return cached

        url = f"{self.api_base}/simple/price"
        params = {"ids": coin_id, "vs_currencies": currency}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()

        quote = payload.get(coin_id) if isinstance(payload, dict) else None
        if not isinstance(quote, dict):
            raise FiatRateLookupError(f"Unexpected rate payload for {coin_id}.")
        if currency not in quote:
            logger.info("fiat_rates_client: currency not quoted coin=%s currency=%s", coin_id, currency)
            return None
        value = Decimal(str(quote[currency]))
        if value < 0:
            raise FiatRateLookupError(f"Negative rate for {coin_id}/{currency}.")
        self._cache_set(coin_id=coin_id, currency=currency, value=value)
        return value
