from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class OverlayWebSocketHub:
    """In-process WebSocket fan-out to every connected overlay viewer.

    Contract:
      - register a viewer via `connect(websocket)`.
      - push `{"event": name, "data": payload}` messages with `broadcast(message)`.

    Messages should be JSON-serializable dicts. A viewer whose send fails is dropped.
    """

    def __init__(self) -> None:
        self._conns: set[WebSocket] = set()
        self._lock = asyncio.Lock()

    @property
    def connection_count(self) -> int:
        return len(self._conns)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self._conns.add(websocket)
        logger.debug("viewer connected (%d total)", len(self._conns))

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self._conns.discard(websocket)
        logger.debug("viewer disconnected (%d total)", len(self._conns))

    async def broadcast(self, message: dict[str, object]) -> None:
        async with self._lock:
            conns = list(self._conns)

        if not conns:
            return

        dead: list[WebSocket] = []
        for ws in conns:
            try:
                await ws.send_json(message)
            except Exception:
                dead.append(ws)

        if dead:
            async with self._lock:
                for ws in dead:
                    self._conns.discard(ws)
            logger.debug("dropped %d dead viewer(s)", len(dead))
