import logging
import ssl
import uuid
from typing import Optional

import websockets

from pricefeed.market.price_simulator import PriceSimulator
from pricefeed.market.tickers import SUPPORTED_TICKERS
from .connection_manager import ConnectionManager
from .message_handler import MessageHandler
from .price_broadcaster import PriceBroadcaster

logger = logging.getLogger(__name__)


class WebSocketServer:

    def __init__(self, tick_interval: float = 1.0, simulator: Optional[PriceSimulator] = None):

        self.simulator = simulator or PriceSimulator()
        self.connection_manager = ConnectionManager()
        self.broadcaster = PriceBroadcaster(self.simulator, self.connection_manager, interval=tick_interval)
        self.message_handler = MessageHandler(
            connection_manager=self.connection_manager,
            simulator=self.simulator
        )

        self.running = False
        self.server = None

    async def start(self, host: str = "0.0.0.0", port: int = 3000, ssl_context: Optional[ssl.SSLContext] = None):
        """
        Serve WebSocket connections directly and start broadcasting
        """
        if self.running:
            return

        scheme = "wss" if ssl_context else "ws"
        logger.info(f"Starting WebSocket server on {scheme}://{host}:{port}")
        self.server = await websockets.serve(self.handle_client, host, port, ssl=ssl_context)

        self.start_broadcast()
        logger.info(f"WebSocket server is running on {scheme}://{host}:{port}")

    def start_broadcast(self):
        """
        Start the price broadcast without owning a listener, for hosting under another server
        """
        if self.running:
            return

        self.running = True
        self.broadcaster.start()
        logger.info(f"Supported stocks: {', '.join(SUPPORTED_TICKERS)}")

    async def stop(self):
        """
        Stop broadcasting, close the listener and every client
        """
        if not self.running:
            return

        self.running = False
        await self.broadcaster.stop()

        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None

        await self.connection_manager.close_all()

        logger.info("WebSocket server stopped")

    async def handle_client(self, websocket):
        """
        Serve one connection until it closes

        Args:
            websocket: Transport yielding text frames on async iteration
                and exposing async send() and close()
        """
        client_id = str(uuid.uuid4())
        client = self.connection_manager.add_client(websocket, client_id)

        try:
            async for message in websocket:
                try:
                    await self.message_handler.handle_raw(client_id, message)
                except Exception as e:
                    logger.error(f"Error handling message from {client}: {e}")

        except websockets.exceptions.ConnectionClosed:
            logger.info(f"Connection closed: {client}")
        except Exception as e:
            logger.error(f"Error handling connection {client}: {e}")
        finally:
            self.connection_manager.remove_client(client_id)
