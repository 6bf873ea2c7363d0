"""
Chat endpoint
=============

WS /ws/chat -- single broadcast room; every frame, text or binary, is echoed
               to all connected participants, the sender included.
"""

import logging

from fastapi import APIRouter, Depends, WebSocket

from tripshare.api.broadcast import BroadcastChannel
from tripshare.api.dependencies import get_chat_channel

router = APIRouter(tags=["chat"])

logger = logging.getLogger(__name__)


@router.websocket("/ws/chat")
async def chat(
    websocket: WebSocket,
    channel: BroadcastChannel = Depends(get_chat_channel),
):
    await channel.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            payload = message.get("text")
            if payload is None:
                payload = message.get("bytes")
            if payload is None:
                continue
            logger.debug("Chat message: %r", payload)
            await channel.broadcast(payload)
    finally:
        channel.disconnect(websocket)
