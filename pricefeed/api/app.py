import datetime
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from pricefeed import __version__
from pricefeed.market.tickers import SUPPORTED_TICKERS
from pricefeed.settings import Settings, get_settings
from pricefeed.sockets.ws_server import WebSocketServer
from .ws_router import ws_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, ws_server: Optional[WebSocketServer] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        settings: Settings to use, the cached environment settings if not given
        ws_server: Server core to host, a new one if not given

    Returns:
        The application, which starts and stops the price broadcast with its lifespan
    """
    settings = settings or get_settings()
    ws_server = ws_server or WebSocketServer(tick_interval=settings.tick_interval)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.started_at = datetime.datetime.now()
        ws_server.start_broadcast()
        try:
            yield
        finally:
            await ws_server.stop()

    app = FastAPI(
        title="pricefeed",
        description="Simulated real-time stock prices over WebSockets",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.ws_server = ws_server

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(ws_router)

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint"""
        started_at = getattr(app.state, "started_at", None)
        return {
            "status": "ok",
            "version": __version__,
            "started_at": started_at.isoformat() if started_at else None,
            "clients": len(ws_server.connection_manager.connections),
            "ticks": ws_server.simulator.tick_count,
        }

    @app.get("/api/tickers")
    async def list_tickers():
        """Supported tickers in display order"""
        return {"tickers": list(SUPPORTED_TICKERS)}

    # Mounted last so the routes above take precedence
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
    else:
        logger.warning(f"Static directory not found, UI disabled: {settings.static_dir}")

    return app
