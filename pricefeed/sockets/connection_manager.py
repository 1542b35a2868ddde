"""
Connection manager for WebSocket connections
"""
import json
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

import websockets
from pydantic import BaseModel

from .client_connection import ClientConnection
from .subscription_registry import SubscriptionRegistry

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages WebSocket client connections and their subscriptions
    """
    def __init__(self, registry: Optional[SubscriptionRegistry] = None):
        """
        Initialize the connection manager

        Args:
            registry: Optional subscription registry, a new one if not given
        """
        self.connections: Dict[str, ClientConnection] = {}
        self.registry = registry or SubscriptionRegistry()

    def add_client(self, websocket, client_id: str) -> ClientConnection:
        """
        Add a new client connection

        Args:
            websocket: The WebSocket connection
            client_id: Unique ID for the client

        Returns:
            The newly created client connection
        """
        client = ClientConnection(websocket, client_id, self.registry)
        self.connections[client_id] = client
        logger.info(f"Client connected: {client}")
        return client

    def remove_client(self, client_id: str):
        """
        Remove a client and its subscriptions

        Args:
            client_id: The ID of the client to remove
        """
        client = self.connections.pop(client_id, None)
        if client is None:
            return

        client.close()
        logger.info(f"Client disconnected: {client}")

    def get_client(self, client_id: str) -> Optional[ClientConnection]:
        return self.connections.get(client_id)

    def get_all_clients(self) -> List[ClientConnection]:
        return list(self.connections.values())

    def login(self, client_id: str, email: str) -> bool:
        """
        Set the identity label for a client

        Args:
            client_id: The client ID
            email: The unverified label sent by the client

        Returns:
            True if the client exists
        """
        client = self.get_client(client_id)
        if not client:
            return False

        client.login(email)
        logger.info(f"Logged in: {client}")
        return True

    def subscribe(self, client_id: str, stocks: Iterable[Any]) -> Optional[FrozenSet[str]]:
        """
        Replace the subscriptions of a client

        Args:
            client_id: The client ID
            stocks: The requested tickers

        Returns:
            The new subscription set, or None if the client is unknown or
            has not logged in
        """
        client = self.get_client(client_id)
        if not client:
            return None

        tickers = client.subscribe(stocks)
        if tickers is None:
            logger.debug(f"Ignoring subscribe before login from {client}")
            return None

        logger.info(f"{client} subscribed to {sorted(tickers)}")
        return tickers

    def get_subscribers(self) -> List[Tuple[ClientConnection, FrozenSet[str]]]:
        """
        Open clients with a non-empty subscription set

        Returns:
            A snapshot list of (client, tickers) pairs
        """
        subscribers = []
        for client_id, tickers in self.registry.items():
            if not tickers:
                continue
            client = self.get_client(client_id)
            if client is not None:
                subscribers.append((client, tickers))
        return subscribers

    async def send_message(self, client_id: str, message: Any) -> bool:
        """
        Send a WebSocket message to a client

        Failures are logged and swallowed; a closed connection is removed.

        Args:
            client_id: The client ID
            message: A pydantic model, a dict or an already encoded string

        Returns:
            True if the message was handed to the transport
        """
        client = self.get_client(client_id)
        if not client:
            logger.debug(f"Attempted to send message to unknown client: {client_id}")
            return False

        try:
            if isinstance(message, BaseModel):
                message = message.model_dump_json()
            elif not isinstance(message, str):
                message = json.dumps(message)

            await client.websocket.send(message)
            return True

        except websockets.exceptions.ConnectionClosed:
            logger.info(f"Connection already closed for {client}")
            self.remove_client(client_id)
        except Exception as e:
            logger.error(f"Error sending message to {client}: {e}")
        return False

    async def close_all(self):
        """Close every connection and forget all clients"""
        for client in self.get_all_clients():
            try:
                await client.websocket.close()
            except Exception as e:
                logger.error(f"Error closing connection for {client}: {e}")

            self.remove_client(client.client_id)
