from __future__ import annotations

from decimal import Decimal

from app.domain.services.decimals import round_to_scale


MILLIS_IN_DAY = 24 * 60 * 60 * 1000
YEARLY_FEES_PERCENT_SCALE = 2


def projection_period_ms(days: int) -> int:
    if days <= 0:
        raise ValueError("projection days must be positive.")
    return days * MILLIS_IN_DAY


def fee_percent_projection(
    *,
    tvl_value: Decimal,
    fees_value: Decimal,
    window_ms: int,
    projection_ms: int,
) -> Decimal:
    """Fees earned over ``window_ms`` scaled to ``projection_ms``, as percent of TVL."""
    if tvl_value <= 0 or window_ms <= 0:
        return Decimal("0")
    fees_per_ms = fees_value / Decimal(window_ms)
    projected_fees = fees_per_ms * Decimal(projection_ms)
    percent = projected_fees / tvl_value * Decimal("100")
    return round_to_scale(percent, YEARLY_FEES_PERCENT_SCALE)
