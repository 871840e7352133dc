from __future__ import annotations

import httpx

from app.application.ports.network_port import NetworkPort


class NodeInfoError(RuntimeError):
    pass


class NodeNetworkClient(NetworkPort):
    def __init__(
        self,
        *,
        api_base: str,
        timeout_seconds: float,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout_seconds
        self._transport = transport

    async def get_current_height(self) -> int:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.get(f"{self.api_base}/info")
            response.raise_for_status()
            payload = response.json()
        height = payload.get("fullHeight") if isinstance(payload, dict) else None
        if height is None:
            raise NodeInfoError("Node info payload has no fullHeight.")
        return int(height)
