from __future__ import annotations

from decimal import ROUND_HALF_UP, Context, Decimal


def round_to_scale(value: Decimal, scale: int) -> Decimal:
    """Quantize ``value`` to ``scale`` places, whatever its magnitude."""
    if scale < 0:
        raise ValueError("scale must be non-negative.")
    quantum = Decimal(1).scaleb(-scale)
    # Precision must cover every integer digit plus the requested places.
    context = Context(prec=max(28, value.adjusted() + scale + 2), rounding=ROUND_HALF_UP)
    return value.quantize(quantum, rounding=ROUND_HALF_UP, context=context)


def normalize_amount(amount: int, decimals: int | None) -> Decimal:
    """Whole-unit value of ``amount`` base units."""
    return Decimal(amount) / (Decimal(10) ** (decimals or 0))
