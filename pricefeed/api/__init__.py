"""
HTTP API package: static UI, WebSocket endpoint and status routes
"""
from .app import create_app
from .ws_router import ws_router

__all__ = [
    'create_app',
    'ws_router',
]
