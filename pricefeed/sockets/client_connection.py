"""
Client connection class for WebSocket server
"""
from enum import Enum
from typing import Any, FrozenSet, Iterable, Optional

from pricefeed.market.tickers import filter_supported
from .subscription_registry import SubscriptionRegistry


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    IDENTIFIED = "identified"


class ClientConnection:
    """
    Represents a connected WebSocket client

    Subscriptions are stored in the shared registry under this client's ID,
    so the broadcast loop and the session always agree.
    """
    def __init__(self, websocket, client_id: str, registry: SubscriptionRegistry):
        """
        Initialize a new client connection

        Args:
            websocket: The transport connection, anything with async send() and close()
            client_id: Unique ID for the client
            registry: Registry holding this client's subscriptions
        """
        self.websocket = websocket
        self.client_id = client_id
        self.registry = registry
        self.email: Optional[str] = None

    @property
    def state(self) -> SessionState:
        return SessionState.IDENTIFIED if self.email is not None else SessionState.ANONYMOUS

    @property
    def identified(self) -> bool:
        return self.state is SessionState.IDENTIFIED

    @property
    def subscriptions(self) -> FrozenSet[str]:
        return self.registry.get(self.client_id)

    def login(self, email: str):
        """
        Record the identity label and reset subscriptions

        Logging in again overwrites the label and clears subscriptions.
        """
        self.email = email
        self.registry.set(self.client_id, ())

    def subscribe(self, requested: Iterable[Any]) -> Optional[FrozenSet[str]]:
        """
        Replace subscriptions with the supported subset of the request

        Args:
            requested: Tickers sent by the client

        Returns:
            The new subscription set, or None if the client has not logged in
        """
        if not self.identified:
            return None
        return self.registry.set(self.client_id, filter_supported(requested))

    def close(self):
        """Drop this client's registry entry"""
        self.registry.remove(self.client_id)

    def __str__(self):
        return f"Client({self.client_id}{':' + self.email if self.email else ''})"
