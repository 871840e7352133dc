from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from app.application.ports.orders_port import OrdersPort
from app.application.ports.pools_port import PoolsPort


class ReadSession(Protocol):
    pools: PoolsPort
    orders: OrdersPort


class ReadTransactorPort(Protocol):
    def begin(self) -> AbstractAsyncContextManager[ReadSession]:
        """Scope whose reads all observe one consistent snapshot of the store."""
        ...
