from __future__ import annotations

from decimal import Decimal

from app.domain.entities.amm_stats import PRICE_SCALE
from app.domain.services.decimals import normalize_amount, round_to_scale


def calculate_real_price(
    *,
    amount_x: int,
    decimals_x: int | None,
    amount_y: int,
    decimals_y: int | None,
) -> Decimal:
    """Quote-per-base spot price of a reserve pair after decimal normalization.

    Both amounts are promoted to ``Decimal`` from ``int`` before division, so
    reserves beyond 64 bits are priced exactly. An empty X reserve prices at 0.
    """
    if amount_x == 0:
        return Decimal("0")
    return normalize_amount(amount_y, decimals_y) / normalize_amount(amount_x, decimals_x)


def calculate_display_price(
    *,
    amount_x: int,
    decimals_x: int | None,
    amount_y: int,
    decimals_y: int | None,
    scale: int = PRICE_SCALE,
) -> Decimal:
    price = calculate_real_price(
        amount_x=amount_x,
        decimals_x=decimals_x,
        amount_y=amount_y,
        decimals_y=decimals_y,
    )
    return round_to_scale(price, scale)
