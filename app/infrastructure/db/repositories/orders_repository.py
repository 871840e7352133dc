from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from app.application.ports.orders_port import OrdersPort
from app.domain.entities.orders import DepositVolumeRecord, SwapVolumeRecord
from app.domain.entities.time_window import TimeWindow
from app.infrastructure.db.mappers.amm_mapper import (
    map_row_to_deposit_volume,
    map_row_to_swap_volume,
)


class SqlOrdersRepository(OrdersPort):
    def __init__(self, conn: AsyncConnection):
        self._conn = conn

    async def get_swap_txs(self, window: TimeWindow) -> list[SwapVolumeRecord]:
        sql = """
            WITH windowed AS (
              SELECT sw.input_id, sw.input_value
              FROM public.swaps sw
              WHERE sw.output_amount IS NOT NULL
                AND (CAST(:from_ms AS bigint) IS NULL OR sw.timestamp >= CAST(:from_ms AS bigint))
                AND (CAST(:to_ms AS bigint) IS NULL OR sw.timestamp <= CAST(:to_ms AS bigint))
            ),
            totals AS (
              SELECT COUNT(*) AS num_txs FROM windowed
            )
            SELECT
              t.num_txs,
              w.input_id,
              SUM(w.input_value) AS input_amount,
              a.ticker           AS input_ticker,
              a.decimals         AS input_decimals
            FROM windowed w
            CROSS JOIN totals t
            LEFT JOIN public.assets a ON a.id = w.input_id
            GROUP BY t.num_txs, w.input_id, a.ticker, a.decimals
            ORDER BY w.input_id
        """
        params = {"from_ms": window.from_ms, "to_ms": window.to_ms}
        rows = (await self._conn.execute(text(sql), params)).mappings().all()
        return [map_row_to_swap_volume(row) for row in rows]

    async def get_deposit_txs(self, window: TimeWindow) -> list[DepositVolumeRecord]:
        sql = """
            WITH windowed AS (
              SELECT d.input_id_x, d.input_amount_x, d.input_id_y, d.input_amount_y
              FROM public.deposits d
              WHERE d.output_amount_lp IS NOT NULL
                AND (CAST(:from_ms AS bigint) IS NULL OR d.timestamp >= CAST(:from_ms AS bigint))
                AND (CAST(:to_ms AS bigint) IS NULL OR d.timestamp <= CAST(:to_ms AS bigint))
            ),
            totals AS (
              SELECT COUNT(*) AS num_txs FROM windowed
            )
            SELECT
              t.num_txs,
              w.input_id_x          AS x_id,
              SUM(w.input_amount_x) AS x_amount,
              ax.ticker             AS x_ticker,
              ax.decimals           AS x_decimals,
              w.input_id_y          AS y_id,
              SUM(w.input_amount_y) AS y_amount,
              ay.ticker             AS y_ticker,
              ay.decimals           AS y_decimals
            FROM windowed w
            CROSS JOIN totals t
            LEFT JOIN public.assets ax ON ax.id = w.input_id_x
            LEFT JOIN public.assets ay ON ay.id = w.input_id_y
            GROUP BY
              t.num_txs, w.input_id_x, ax.ticker, ax.decimals,
              w.input_id_y, ay.ticker, ay.decimals
            ORDER BY w.input_id_x, w.input_id_y
        """
        params = {"from_ms": window.from_ms, "to_ms": window.to_ms}
        rows = (await self._conn.execute(text(sql), params)).mappings().all()
        return [map_row_to_deposit_volume(row) for row in rows]
