"""
Message handler for WebSocket messages
"""
import json
import logging
from typing import Any, Dict, Union

from pydantic import ValidationError

from pricefeed.market.price_simulator import PriceSimulator
from .connection_manager import ConnectionManager
from .models import LoginMessage, PricesMessage, SubscribeMessage, WSMessageType

logger = logging.getLogger(__name__)


class MessageHandler:
    """
    Handles processing of WebSocket messages

    Invalid messages are logged and dropped. Nothing is ever sent back to
    the client as an error and the connection stays open.
    """
    def __init__(self, connection_manager: ConnectionManager, simulator: PriceSimulator):
        """
        Initialize the MessageHandler

        Args:
            connection_manager: Manager for client connections
            simulator: Source of current prices for subscribe acknowledgments
        """
        self.connection_manager = connection_manager
        self.simulator = simulator

    async def handle_raw(self, client_id: str, raw: Union[str, bytes]):
        """
        Decode a text frame and handle it

        Args:
            client_id: The ID of the client connection
            raw: The frame as received from the transport
        """
        if not isinstance(raw, str):
            logger.warning(f"Invalid message from {client_id}: binary frame")
            return

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Invalid message from {client_id}: {e}")
            return

        await self.handle_message(client_id, data)

    async def handle_message(self, client_id: str, data: Any):
        """
        Handle an incoming decoded WebSocket message

        Args:
            client_id: The ID of the client connection
            data: The message data
        """
        client = self.connection_manager.get_client(client_id)
        if not client:
            logger.warning(f"Received message for unknown client ID: {client_id}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Invalid message from {client}: expected an object")
            return

        message_type = data.get("type")
        try:
            if message_type == WSMessageType.LOGIN:
                await self._handle_login(client_id, data)

            elif message_type == WSMessageType.SUBSCRIBE:
                await self._handle_subscribe(client_id, data)

            else:
                logger.warning(f"Invalid message from {client}: unknown type {message_type!r}")

        except ValidationError as e:
            logger.warning(f"Invalid {message_type} message from {client}: {e.error_count()} validation error(s)")

    async def _handle_login(self, client_id: str, data: Dict):
        """Handle login messages"""
        login_msg = LoginMessage.model_validate(data)
        self.connection_manager.login(client_id, login_msg.email)

    async def _handle_subscribe(self, client_id: str, data: Dict):
        """Handle subscribe messages, acknowledging with current prices"""
        subscribe_msg = SubscribeMessage.model_validate(data)
        tickers = self.connection_manager.subscribe(client_id, subscribe_msg.stocks)
        if tickers is None:
            return

        ack = PricesMessage(prices=self.simulator.snapshot(tickers))
        await self.connection_manager.send_message(client_id, ack)
