from __future__ import annotations

from decimal import Decimal

import pytest

from amm_fakes import trace
from app.domain.services.slippage import (
    average_slippage,
    group_by_height,
    slippage_percent,
)


def test_slippage_percent_is_relative_to_initial_price():
    initial = trace(10, 1, 100, 200)
    final = trace(11, 2, 100, 180)
    assert slippage_percent(initial, final) == Decimal("10")


def test_slippage_percent_of_zero_price_is_zero():
    initial = trace(10, 1, 100, 0)
    final = trace(11, 2, 100, 180)
    assert slippage_percent(initial, final) == Decimal("0")


def test_group_by_height_sorts_buckets_and_entries():
    traces = [
        trace(13, 4, 1, 1),
        trace(10, 1, 1, 1),
        trace(12, 3, 1, 1),
        trace(11, 2, 1, 1),
    ]
    buckets = group_by_height(traces, bucket_width=2)
    assert [[item.gindex for item in bucket] for bucket in buckets] == [[1, 2], [3, 4]]


def test_group_by_height_uses_configured_width():
    traces = [trace(height, height, 1, 1) for height in range(9, 15)]
    assert len(group_by_height(traces, bucket_width=3)) == 2
    assert len(group_by_height(traces, bucket_width=1)) == 6


def test_group_by_height_rejects_non_positive_width():
    with pytest.raises(ValueError):
        group_by_height([trace(1, 1, 1, 1)], bucket_width=0)


def test_single_bucket_uses_anchor_as_initial_state():
    anchor = trace(8, 0, 100, 200)
    traces = [trace(10, 1, 100, 210), trace(11, 2, 100, 220)]

    value = average_slippage(traces, initial_state=anchor, bucket_width=2)

    assert value == slippage_percent(anchor, traces[-1])
    assert value == Decimal("10")


def test_single_bucket_without_anchor_uses_earliest_trace():
    traces = [trace(11, 2, 100, 220), trace(10, 1, 100, 210)]

    value = average_slippage(traces, initial_state=None, bucket_width=2)

    assert value == slippage_percent(traces[1], traces[0])


def test_multiple_buckets_average_segment_slippage():
    traces = [
        trace(10, 1, 100, 200),
        trace(11, 2, 100, 210),
        trace(12, 3, 100, 220),
        trace(13, 4, 100, 198),
    ]

    value = average_slippage(traces, initial_state=None, bucket_width=2)

    first = slippage_percent(traces[0], traces[1])
    second = slippage_percent(traces[1], traces[3])
    assert first == Decimal("5")
    assert value == (first + second) / 2


def test_later_bucket_without_preceding_trace_uses_its_own_minimum():
    traces = [trace(20, 1, 100, 200), trace(10, 2, 100, 250)]

    value = average_slippage(traces, initial_state=None, bucket_width=2)

    assert value == Decimal("12.5")


def test_no_traces_is_zero():
    assert average_slippage([], initial_state=None, bucket_width=2) == Decimal("0")
