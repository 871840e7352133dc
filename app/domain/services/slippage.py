from __future__ import annotations

from collections import defaultdict
from decimal import Decimal

from app.domain.entities.pool import PoolTrace
from app.domain.services.real_price import calculate_real_price


def trace_price(trace: PoolTrace) -> Decimal:
    return calculate_real_price(
        amount_x=trace.locked_x.amount,
        decimals_x=trace.locked_x.decimals,
        amount_y=trace.locked_y.amount,
        decimals_y=trace.locked_y.decimals,
    )


def slippage_percent(init_state: PoolTrace, final_state: PoolTrace) -> Decimal:
    min_price = trace_price(init_state)
    max_price = trace_price(final_state)
    if min_price == 0:
        return Decimal("0")
    return abs(max_price - min_price) / (min_price / Decimal("100"))


def group_by_height(traces: list[PoolTrace], *, bucket_width: int) -> list[list[PoolTrace]]:
    """Buckets of traces sharing ``height // bucket_width``, ascending by height.

    Traces inside a bucket are ordered by global index.
    """
    if bucket_width <= 0:
        raise ValueError("bucket_width must be positive.")
    buckets: dict[int, list[PoolTrace]] = defaultdict(list)
    for trace in sorted(traces, key=lambda item: item.gindex):
        buckets[trace.height // bucket_width].append(trace)
    return [buckets[key] for key in sorted(buckets)]


def average_slippage(
    traces: list[PoolTrace],
    *,
    initial_state: PoolTrace | None,
    bucket_width: int,
) -> Decimal:
    if not traces:
        return Decimal("0")
    buckets = group_by_height(traces, bucket_width=bucket_width)

    init_state = initial_state or min(traces, key=lambda item: item.gindex)
    first_window = slippage_percent(init_state, buckets[0][-1])
    if len(buckets) == 1:
        return first_window

    by_segment = [first_window]
    for bucket in buckets[1:]:
        window_min_gindex = bucket[0].gindex
        preceding = [trace for trace in traces if trace.gindex < window_min_gindex]
        min_state = max(preceding, key=lambda item: item.gindex) if preceding else bucket[0]
        by_segment.append(slippage_percent(min_state, bucket[-1]))
    return sum(by_segment, Decimal("0")) / Decimal(len(by_segment))
