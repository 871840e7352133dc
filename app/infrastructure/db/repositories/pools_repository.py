from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection

from app.application.ports.pools_port import PoolsPort
from app.domain.entities.asset import AssetInfo
from app.domain.entities.pool import (
    PoolFeesAndVolumeSnapshot,
    PoolFeesSnapshot,
    PoolInfo,
    PoolSnapshot,
    PoolTrace,
    PoolVolumeSnapshot,
    TimestampedAmounts,
)
from app.domain.entities.time_window import TimeWindow
from app.infrastructure.db.mappers.amm_mapper import (
    map_row_to_asset_info,
    map_row_to_pool_fees,
    map_row_to_pool_fees_and_volume,
    map_row_to_pool_info,
    map_row_to_pool_snapshot,
    map_row_to_pool_trace,
    map_row_to_pool_volume,
    map_row_to_timestamped_amounts,
)


logger = logging.getLogger(__name__)

FEE_DENOMINATOR = 1000

LATEST_POOL_STATES_SQL = """
    SELECT DISTINCT ON (p.pool_id)
      p.pool_id,
      p.x_id,
      p.x_amount,
      p.y_id,
      p.y_amount,
      p.fee_num,
      p.timestamp
    FROM public.pools p
    WHERE (CAST(:pool_id AS text) IS NULL OR p.pool_id = CAST(:pool_id AS text))
    ORDER BY p.pool_id, p.gindex DESC
"""

POOL_STATE_COLUMNS_SQL = """
      s.pool_id,
      s.x_id,
      s.x_amount,
      ax.ticker   AS x_ticker,
      ax.decimals AS x_decimals,
      s.y_id,
      s.y_amount,
      ay.ticker   AS y_ticker,
      ay.decimals AS y_decimals
"""

TRADED_SQL = f"""
    WITH latest AS (
      {LATEST_POOL_STATES_SQL}
    ),
    windowed AS (
      SELECT
        sw.pool_id,
        sw.input_id,
        sw.input_value,
        sw.min_output_id,
        sw.output_amount
      FROM public.swaps sw
      WHERE sw.output_amount IS NOT NULL
        AND (CAST(:pool_id AS text) IS NULL OR sw.pool_id = CAST(:pool_id AS text))
        AND (CAST(:from_ms AS bigint) IS NULL OR sw.timestamp >= CAST(:from_ms AS bigint))
        AND (CAST(:to_ms AS bigint) IS NULL OR sw.timestamp <= CAST(:to_ms AS bigint))
    )
    SELECT
      l.pool_id,
      l.x_id,
      ax.ticker   AS x_ticker,
      ax.decimals AS x_decimals,
      l.y_id,
      ay.ticker   AS y_ticker,
      ay.decimals AS y_decimals,
      COALESCE(SUM(w.output_amount) FILTER (WHERE w.min_output_id = l.x_id), 0) AS volume_x,
      COALESCE(SUM(w.output_amount) FILTER (WHERE w.min_output_id = l.y_id), 0) AS volume_y,
      FLOOR(
        COALESCE(SUM(w.input_value) FILTER (WHERE w.input_id = l.x_id), 0)
        * ({FEE_DENOMINATOR} - l.fee_num) / {FEE_DENOMINATOR}
      ) AS fees_x,
      FLOOR(
        COALESCE(SUM(w.input_value) FILTER (WHERE w.input_id = l.y_id), 0)
        * ({FEE_DENOMINATOR} - l.fee_num) / {FEE_DENOMINATOR}
      ) AS fees_y
    FROM windowed w
    JOIN latest l ON l.pool_id = w.pool_id
    LEFT JOIN public.assets ax ON ax.id = l.x_id
    LEFT JOIN public.assets ay ON ay.id = l.y_id
    GROUP BY
      l.pool_id, l.x_id, ax.ticker, ax.decimals,
      l.y_id, ay.ticker, ay.decimals, l.fee_num
    ORDER BY l.pool_id
"""


def _window_params(window: TimeWindow) -> dict[str, int | None]:
    return {"from_ms": window.from_ms, "to_ms": window.to_ms}


class SqlPoolsRepository(PoolsPort):
    def __init__(self, conn: AsyncConnection, *, recent_pools_ms: int):
        self._conn = conn
        self._recent_pools_ms = recent_pools_ms

    async def snapshots(self, *, recent_only: bool = False) -> list[PoolSnapshot]:
        sql = f"""
            WITH latest AS (
              {LATEST_POOL_STATES_SQL}
            )
            SELECT
              {POOL_STATE_COLUMNS_SQL}
            FROM latest s
            LEFT JOIN public.assets ax ON ax.id = s.x_id
            LEFT JOIN public.assets ay ON ay.id = s.y_id
            WHERE (
              NOT CAST(:recent_only AS boolean)
              OR s.timestamp >= (
                CAST(EXTRACT(EPOCH FROM now()) * 1000 AS bigint) - CAST(:recent_pools_ms AS bigint)
              )
            )
            ORDER BY s.pool_id
        """
        params = {
            "pool_id": None,
            "recent_only": recent_only,
            "recent_pools_ms": self._recent_pools_ms,
        }
        rows = (await self._conn.execute(text(sql), params)).mappings().all()
        logger.debug("pools_repo: snapshots recent_only=%s rows=%s", recent_only, len(rows))
        return [map_row_to_pool_snapshot(row) for row in rows]

    async def snapshot(self, pool_id: str) -> PoolSnapshot | None:
        sql = f"""
            WITH latest AS (
              {LATEST_POOL_STATES_SQL}
            )
            SELECT
              {POOL_STATE_COLUMNS_SQL}
            FROM latest s
            LEFT JOIN public.assets ax ON ax.id = s.x_id
            LEFT JOIN public.assets ay ON ay.id = s.y_id
        """
        row = (await self._conn.execute(text(sql), {"pool_id": pool_id})).mappings().first()
        return map_row_to_pool_snapshot(row) if row else None

    async def info(self, pool_id: str) -> PoolInfo | None:
        sql = """
            SELECT
              sw.pool_id,
              MIN(sw.timestamp) AS first_swap_timestamp
            FROM public.swaps sw
            WHERE sw.pool_id = :pool_id
            GROUP BY sw.pool_id
        """
        row = (await self._conn.execute(text(sql), {"pool_id": pool_id})).mappings().first()
        return map_row_to_pool_info(row) if row else None

    async def volumes(self, window: TimeWindow) -> list[PoolVolumeSnapshot]:
        params = {"pool_id": None, **_window_params(window)}
        rows = (await self._conn.execute(text(TRADED_SQL), params)).mappings().all()
        return [map_row_to_pool_volume(row) for row in rows]

    async def volume(self, pool_id: str, window: TimeWindow) -> PoolVolumeSnapshot | None:
        params = {"pool_id": pool_id, **_window_params(window)}
        row = (await self._conn.execute(text(TRADED_SQL), params)).mappings().first()
        return map_row_to_pool_volume(row) if row else None

    async def fees(self, pool_id: str, window: TimeWindow) -> PoolFeesSnapshot | None:
        params = {"pool_id": pool_id, **_window_params(window)}
        row = (await self._conn.execute(text(TRADED_SQL), params)).mappings().first()
        return map_row_to_pool_fees(row) if row else None

    async def get_pool_fees_and_volumes(
        self,
        pool_id: str,
        window: TimeWindow,
    ) -> PoolFeesAndVolumeSnapshot | None:
        params = {"pool_id": pool_id, **_window_params(window)}
        row = (await self._conn.execute(text(TRADED_SQL), params)).mappings().first()
        return map_row_to_pool_fees_and_volume(row) if row else None

    async def trace(self, pool_id: str, *, depth: int, max_height: int) -> list[PoolTrace]:
        sql = f"""
            WITH recent AS (
              SELECT p.*
              FROM public.pools p
              WHERE p.pool_id = :pool_id
                AND p.height <= :max_height
              ORDER BY p.gindex DESC
              LIMIT :depth
            )
            SELECT
              {POOL_STATE_COLUMNS_SQL},
              s.height,
              s.gindex
            FROM recent s
            LEFT JOIN public.assets ax ON ax.id = s.x_id
            LEFT JOIN public.assets ay ON ay.id = s.y_id
            ORDER BY s.gindex ASC
        """
        params = {"pool_id": pool_id, "depth": depth, "max_height": max_height}
        rows = (await self._conn.execute(text(sql), params)).mappings().all()
        logger.debug(
            "pools_repo: trace pool=%s depth=%s max_height=%s rows=%s",
            pool_id,
            depth,
            max_height,
            len(rows),
        )
        return [map_row_to_pool_trace(row) for row in rows]

    async def prev_trace(self, pool_id: str, *, depth: int, max_height: int) -> PoolTrace | None:
        sql = f"""
            WITH previous AS (
              SELECT p.*
              FROM public.pools p
              WHERE p.pool_id = :pool_id
                AND p.height <= :max_height
              ORDER BY p.gindex DESC
              OFFSET :depth
              LIMIT 1
            )
            SELECT
              {POOL_STATE_COLUMNS_SQL},
              s.height,
              s.gindex
            FROM previous s
            LEFT JOIN public.assets ax ON ax.id = s.x_id
            LEFT JOIN public.assets ay ON ay.id = s.y_id
        """
        params = {"pool_id": pool_id, "depth": depth, "max_height": max_height}
        row = (await self._conn.execute(text(sql), params)).mappings().first()
        return map_row_to_pool_trace(row) if row else None

    async def avg_amounts(
        self,
        pool_id: str,
        window: TimeWindow,
        *,
        resolution: int,
    ) -> list[TimestampedAmounts]:
        sql = """
            SELECT
              (p.timestamp / CAST(:bucket_ms AS bigint)) * CAST(:bucket_ms AS bigint) AS timestamp,
              ROUND(AVG(p.x_amount)) AS amount_x,
              ROUND(AVG(p.y_amount)) AS amount_y
            FROM public.pools p
            WHERE p.pool_id = :pool_id
              AND (CAST(:from_ms AS bigint) IS NULL OR p.timestamp >= CAST(:from_ms AS bigint))
              AND (CAST(:to_ms AS bigint) IS NULL OR p.timestamp <= CAST(:to_ms AS bigint))
            GROUP BY 1
            ORDER BY 1
        """
        params = {
            "pool_id": pool_id,
            "bucket_ms": resolution * 60 * 1000,
            **_window_params(window),
        }
        rows = (await self._conn.execute(text(sql), params)).mappings().all()
        return [map_row_to_timestamped_amounts(row) for row in rows]

    async def asset_by_id(self, token_id: str) -> AssetInfo | None:
        sql = """
            SELECT a.id, a.ticker, a.decimals
            FROM public.assets a
            WHERE a.id = :token_id
        """
        row = (await self._conn.execute(text(sql), {"token_id": token_id})).mappings().first()
        return map_row_to_asset_info(row) if row else None
