"""
Broadcast Channel
=================

One implicit chat room.  Every frame received from any participant is
re-sent verbatim to all live connections, the sender included.  Nothing is
persisted and there is no per-user addressing.
"""

from __future__ import annotations

import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketState

logger = logging.getLogger(__name__)


class BroadcastChannel:
    def __init__(self) -> None:
        self._connections: set[WebSocket] = set()

    def __len__(self) -> int:
        return len(self._connections)

    async def connect(self, websocket: WebSocket) -> None:
        # Registered before the handshake completes; broadcast skips sockets
        # that are not yet accepted.
        self._connections.add(websocket)
        await websocket.accept()
        logger.info("Chat participant connected (%d online)", len(self))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self._connections:
            self._connections.discard(websocket)
            logger.info("Chat participant disconnected (%d online)", len(self))

    async def broadcast(self, payload: str | bytes) -> int:
        """Send *payload* to every connected participant; returns deliveries.

        Text is re-sent as a text frame and bytes as a binary frame.
        """
        delivered = 0
        for websocket in list(self._connections):
            if websocket.application_state != WebSocketState.CONNECTED:
                continue
            try:
                if isinstance(payload, bytes):
                    await websocket.send_bytes(payload)
                else:
                    await websocket.send_text(payload)
                delivered += 1
            except Exception as exc:
                logger.warning("Dropping chat participant after failed send: %s", exc)
                self.disconnect(websocket)
        return delivered
