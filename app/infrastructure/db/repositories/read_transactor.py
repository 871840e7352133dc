from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine

from app.application.ports.read_transactor_port import ReadTransactorPort
from app.infrastructure.db.repositories.orders_repository import SqlOrdersRepository
from app.infrastructure.db.repositories.pools_repository import SqlPoolsRepository


@dataclass(frozen=True)
class SqlReadSession:
    pools: SqlPoolsRepository
    orders: SqlOrdersRepository


class SqlReadTransactor(ReadTransactorPort):
    def __init__(self, engine: AsyncEngine, *, recent_pools_ms: int):
        self._engine = engine
        self._recent_pools_ms = recent_pools_ms

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[SqlReadSession]:
        async with self._engine.connect() as conn:
            conn = await conn.execution_options(
                isolation_level="REPEATABLE READ",
                postgresql_readonly=True,
            )
            async with conn.begin():
                yield SqlReadSession(
                    pools=SqlPoolsRepository(conn, recent_pools_ms=self._recent_pools_ms),
                    orders=SqlOrdersRepository(conn),
                )
