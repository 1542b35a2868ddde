#!/usr/bin/env python
"""
pricefeed CLI

Usage:
  python -m pricefeed                       # HTTP server: UI, /ws endpoint and API
  python -m pricefeed --port 8080           # Override PORT
  python -m pricefeed --mode ws             # Bare WebSocket server, no UI
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn

from pricefeed.market.tickers import SUPPORTED_TICKERS
from pricefeed.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str):
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pricefeed", description="Simulated real-time stock price server")
    parser.add_argument("--mode", choices=["http", "ws"], default="http",
                        help="http serves the UI and /ws; ws runs a bare WebSocket server")
    parser.add_argument("--host", help="Bind address (default: HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, help="Port (default: PORT or 3000)")
    parser.add_argument("--log-level", help="Logging level (default: LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {
        key: value
        for key, value in (("host", args.host), ("port", args.port), ("log_level", args.log_level))
        if value is not None
    }
    return settings.model_copy(update=overrides) if overrides else settings


def run_http(settings: Settings):
    from pricefeed.api.app import create_app

    scheme = "https" if settings.secure else "http"
    logger.info(f"Server running at {scheme}://localhost:{settings.port}")
    logger.info(f"Supported stocks: {', '.join(SUPPORTED_TICKERS)}")

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        ssl_certfile=settings.ssl_certfile if settings.secure else None,
        ssl_keyfile=settings.ssl_keyfile if settings.secure else None,
        log_level=settings.log_level.lower(),
    )


async def run_ws(settings: Settings):
    from pricefeed.sockets.ws_server import WebSocketServer

    server = WebSocketServer(tick_interval=settings.tick_interval)
    try:
        await server.start(host=settings.host, port=settings.port, ssl_context=settings.ssl_context())
        await asyncio.Future()
    finally:
        await server.stop()


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)

    try:
        settings = apply_overrides(get_settings(), args)
        configure_logging(settings.log_level)

        if args.mode == "ws":
            asyncio.run(run_ws(settings))
        else:
            run_http(settings)
    except KeyboardInterrupt:
        logger.info("Server shutdown by user")
    except Exception:
        logger.exception("Unhandled exception in main")
        sys.exit(1)


if __name__ == "__main__":
    main()
