"""
WebSocket price feed server package
"""
from .client_connection import ClientConnection, SessionState
from .connection_manager import ConnectionManager
from .message_handler import MessageHandler
from .price_broadcaster import PriceBroadcaster
from .subscription_registry import SubscriptionRegistry
from .ws_server import WebSocketServer

__all__ = [
    'ClientConnection',
    'ConnectionManager',
    'MessageHandler',
    'PriceBroadcaster',
    'SessionState',
    'SubscriptionRegistry',
    'WebSocketServer',
]
