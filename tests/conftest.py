"""Pytest fixtures for pricefeed tests"""

import json
import random
from typing import List

import pytest
import websockets

from pricefeed.market.price_simulator import PriceSimulator
from pricefeed.sockets.connection_manager import ConnectionManager
from pricefeed.sockets.message_handler import MessageHandler


class FakeWebSocket:
    """In-memory stand-in for a server-side WebSocket connection"""

    def __init__(self, fail_with: Exception = None):
        self.sent: List[str] = []
        self.closed = False
        self.fail_with = fail_with

    async def send(self, message: str):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(message)

    async def close(self):
        self.closed = True

    @property
    def messages(self) -> List[dict]:
        return [json.loads(m) for m in self.sent]


@pytest.fixture
def fake_ws():
    return FakeWebSocket()


@pytest.fixture
def closed_ws():
    """Connection whose sends fail as if the peer already went away"""
    return FakeWebSocket(fail_with=websockets.exceptions.ConnectionClosedError(None, None))


@pytest.fixture
def simulator() -> PriceSimulator:
    return PriceSimulator(rng=random.Random(42))


@pytest.fixture
def connection_manager() -> ConnectionManager:
    return ConnectionManager()


@pytest.fixture
def message_handler(connection_manager, simulator) -> MessageHandler:
    return MessageHandler(connection_manager, simulator)


@pytest.fixture
def make_ws():
    """Factory for extra fake connections"""
    return FakeWebSocket
