from __future__ import annotations

from decimal import Decimal

import pytest

from app.domain.entities.market import Market
from app.domain.entities.asset import AssetAmount
from app.domain.entities.time_window import TimeWindow
from app.domain.services.amm_stats_math import (
    MILLIS_IN_DAY,
    fee_percent_projection,
    projection_period_ms,
)
from app.domain.services.decimals import normalize_amount, round_to_scale
from app.domain.services.real_price import calculate_display_price, calculate_real_price


def test_real_price_example_without_decimals():
    price = calculate_real_price(amount_x=1000, decimals_x=0, amount_y=2000, decimals_y=0)
    assert price == Decimal("2")


def test_real_price_normalizes_decimals():
    price = calculate_real_price(
        amount_x=5 * 10**9,
        decimals_x=9,
        amount_y=10 * 10**2,
        decimals_y=2,
    )
    assert price == Decimal("2")


@pytest.mark.parametrize("shift", [0, 1, 3, 9])
def test_real_price_is_scale_invariant(shift: int):
    base = calculate_real_price(amount_x=1234, decimals_x=2, amount_y=98765, decimals_y=4)
    scaled = calculate_real_price(
        amount_x=1234 * 10**shift,
        decimals_x=2 + shift,
        amount_y=98765 * 10**shift,
        decimals_y=4 + shift,
    )
    assert scaled == base


def test_real_price_handles_amounts_beyond_64_bits():
    huge = 2**70
    price = calculate_real_price(amount_x=huge, decimals_x=0, amount_y=huge * 3, decimals_y=0)
    assert price == Decimal("3")


def test_real_price_of_empty_reserve_is_zero():
    assert calculate_real_price(amount_x=0, decimals_x=0, amount_y=10, decimals_y=0) == Decimal("0")


def test_display_price_rounds_to_six_places():
    price = calculate_display_price(amount_x=3, decimals_x=0, amount_y=1, decimals_y=0)
    assert price == Decimal("0.333333")
    assert price.as_tuple().exponent == -6


def test_display_price_of_drained_pool_keeps_all_digits():
    # 1 base unit of a 9-decimal asset against 10^18 units of a 0-decimal one.
    price = calculate_display_price(amount_x=1, decimals_x=9, amount_y=10**18, decimals_y=0)
    assert price == Decimal(10**27)
    assert price.as_tuple().exponent == -6
    assert len(price.as_tuple().digits) == 34


def test_round_to_scale_rounds_half_up():
    assert round_to_scale(Decimal("1.005"), 2) == Decimal("1.01")
    assert round_to_scale(Decimal("7"), 2) == Decimal("7.00")


def test_round_to_scale_beyond_default_precision():
    value = Decimal("1" + "0" * 40 + ".125")
    assert round_to_scale(value, 2) == Decimal("1" + "0" * 40 + ".13")


def test_normalize_amount_treats_missing_decimals_as_zero():
    assert normalize_amount(1500, None) == Decimal("1500")
    assert normalize_amount(1500, 3) == Decimal("1.5")


def test_fee_projection_scales_window_to_year():
    projection = fee_percent_projection(
        tvl_value=Decimal("1000"),
        fees_value=Decimal("1"),
        window_ms=MILLIS_IN_DAY,
        projection_ms=projection_period_ms(365),
    )
    assert projection == Decimal("36.50")


def test_fee_projection_with_zero_tvl_is_zero():
    projection = fee_percent_projection(
        tvl_value=Decimal("0"),
        fees_value=Decimal("10"),
        window_ms=MILLIS_IN_DAY,
        projection_ms=projection_period_ms(365),
    )
    assert projection == Decimal("0")


def test_fee_projection_with_empty_window_is_zero():
    projection = fee_percent_projection(
        tvl_value=Decimal("10"),
        fees_value=Decimal("10"),
        window_ms=0,
        projection_ms=projection_period_ms(365),
    )
    assert projection == Decimal("0")


def test_projection_period_rejects_non_positive_days():
    with pytest.raises(ValueError):
        projection_period_ms(0)


def test_time_window_duration_falls_back_to_first_swap_and_now():
    window = TimeWindow(from_ms=None, to_ms=None)
    assert window.duration_ms(now_ms=5_000, fallback_from_ms=1_000) == 4_000
    bounded = TimeWindow(from_ms=2_000, to_ms=3_000)
    assert bounded.duration_ms(now_ms=5_000, fallback_from_ms=1_000) == 1_000


def test_market_price_by_either_side():
    market = Market(
        x=AssetAmount(id="a", amount=200),
        y=AssetAmount(id="b", amount=50),
    )
    assert market.price_by("a") == Decimal("0.25")
    assert market.price_by("b") == Decimal("4")
    assert market.counter_asset("a").id == "b"
