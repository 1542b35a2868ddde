import logging

from fastapi import APIRouter, WebSocket

from pricefeed.adapters.starlette_transport import StarletteTransport
from pricefeed.sockets.ws_server import WebSocketServer

logger = logging.getLogger(__name__)

ws_router = APIRouter(tags=["websocket"])


@ws_router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    server: WebSocketServer = websocket.app.state.ws_server
    await websocket.accept()
    logger.debug(f"Accepted WebSocket from {websocket.client}")

    # Runs until the peer goes away; teardown happens inside handle_client
    await server.handle_client(StarletteTransport(websocket))
