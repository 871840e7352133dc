from __future__ import annotations

from typing import Protocol


class NetworkPort(Protocol):
    async def get_current_height(self) -> int:
        ...
