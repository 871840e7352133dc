from __future__ import annotations

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from app.application.ports.markets_port import MarketsPort
from app.domain.entities.market import Market
from app.infrastructure.db.mappers.amm_mapper import map_asset


class SqlMarketsRepository(MarketsPort):
    """Markets derived from the latest state of every pool holding the asset.

    Runs on its own connection, outside any read transaction of the caller.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    async def get_by_asset(self, token_id: str) -> list[Market]:
        sql = """
            WITH latest AS (
              SELECT DISTINCT ON (p.pool_id)
                p.pool_id, p.x_id, p.x_amount, p.y_id, p.y_amount
              FROM public.pools p
              WHERE p.x_id = :token_id OR p.y_id = :token_id
              ORDER BY p.pool_id, p.gindex DESC
            )
            SELECT
              l.pool_id,
              l.x_id,
              l.x_amount,
              ax.ticker   AS x_ticker,
              ax.decimals AS x_decimals,
              l.y_id,
              l.y_amount,
              ay.ticker   AS y_ticker,
              ay.decimals AS y_decimals
            FROM latest l
            LEFT JOIN public.assets ax ON ax.id = l.x_id
            LEFT JOIN public.assets ay ON ay.id = l.y_id
            ORDER BY l.pool_id
        """
        async with self._engine.connect() as conn:
            rows = (await conn.execute(text(sql), {"token_id": token_id})).mappings().all()
        return [Market(x=map_asset(row, "x"), y=map_asset(row, "y")) for row in rows]
