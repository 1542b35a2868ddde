"""
Adapter exposing a Starlette WebSocket through the interface the server core expects
"""
import logging
from typing import AsyncIterator, Union

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class StarletteTransport:
    """
    Wraps an accepted Starlette WebSocket with async send(), close() and
    async iteration over incoming frames, like a websockets connection
    """
    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    @property
    def remote_address(self):
        return self.websocket.client

    async def send(self, message: str):
        await self.websocket.send_text(message)

    async def close(self, code: int = 1000):
        await self.websocket.close(code=code)

    def __aiter__(self) -> AsyncIterator[Union[str, bytes]]:
        return self._frames()

    async def _frames(self) -> AsyncIterator[Union[str, bytes]]:
        # receive_text() fails on binary frames, so read raw ASGI messages
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug(f"Peer {self.remote_address} disconnected with code {message.get('code')}")
                return

            if message.get("text") is not None:
                yield message["text"]
            elif message.get("bytes") is not None:
                yield message["bytes"]
