"""Tests for the periodic price broadcast"""

import asyncio
import logging
from unittest.mock import patch

import pytest

from pricefeed.sockets.price_broadcaster import PriceBroadcaster


@pytest.fixture
def broadcaster(simulator, connection_manager):
    return PriceBroadcaster(simulator, connection_manager, interval=0.01)


def subscribe(connection_manager, ws, client_id, stocks):
    connection_manager.add_client(ws, client_id)
    connection_manager.login(client_id, f"{client_id}@gmail.com")
    connection_manager.subscribe(client_id, stocks)


@pytest.mark.asyncio
class TestRunCycle:
    """A single tick-and-push cycle."""

    async def test_pushes_only_subscribed_prices(self, broadcaster, connection_manager, simulator, make_ws):
        alice, bob = make_ws(), make_ws()
        subscribe(connection_manager, alice, "alice", ["GOOG", "TSLA"])
        subscribe(connection_manager, bob, "bob", ["IBM"])

        sent = await broadcaster.run_cycle()

        assert sent == 2
        assert alice.messages == [{"type": "prices", "prices": simulator.snapshot({"GOOG", "TSLA"})}]
        assert bob.messages == [{"type": "prices", "prices": {"IBM": simulator.get_price("IBM")}}]

    async def test_advances_prices(self, broadcaster, simulator):
        await broadcaster.run_cycle()
        assert simulator.tick_count == 1

    async def test_empty_and_anonymous_sessions_receive_nothing(self, broadcaster, connection_manager, make_ws):
        anon, empty = make_ws(), make_ws()
        connection_manager.add_client(anon, "anon")
        connection_manager.add_client(empty, "empty")
        connection_manager.login("empty", "empty@gmail.com")

        for _ in range(5):
            assert await broadcaster.run_cycle() == 0

        assert anon.sent == []
        assert empty.sent == []

    async def test_disconnected_session_never_referenced(self, broadcaster, connection_manager, make_ws):
        gone = make_ws()
        subscribe(connection_manager, gone, "gone", ["AAPL"])
        connection_manager.remove_client("gone")

        with patch.object(connection_manager, "send_message") as send_message:
            await broadcaster.run_cycle()

        send_message.assert_not_called()
        assert gone.sent == []

    async def test_client_removed_while_cycle_in_flight(self, broadcaster, connection_manager, make_ws, caplog):
        slow, other = make_ws(), make_ws()
        subscribe(connection_manager, slow, "slow", ["AAPL"])
        subscribe(connection_manager, other, "other", ["AAPL"])

        async def slow_send(message):
            await asyncio.sleep(0.05)
            slow.sent.append(message)

        slow.send = slow_send

        with caplog.at_level(logging.WARNING):
            cycle = asyncio.create_task(broadcaster.run_cycle())
            await asyncio.sleep(0.01)
            connection_manager.remove_client("other")
            sent = await cycle

        assert sent == 1
        assert len(slow.sent) == 1
        assert other.sent == []
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    async def test_failed_push_does_not_stop_others(self, broadcaster, connection_manager, closed_ws, make_ws):
        healthy = make_ws()
        subscribe(connection_manager, closed_ws, "broken", ["AAPL"])
        subscribe(connection_manager, healthy, "healthy", ["AAPL"])

        sent = await broadcaster.run_cycle()

        assert sent == 1
        assert len(healthy.sent) == 1
        assert connection_manager.get_client("broken") is None

    async def test_broadcast_prices_within_step_of_ack(self, broadcaster, connection_manager, message_handler, fake_ws):
        connection_manager.add_client(fake_ws, "c1")
        await message_handler.handle_message("c1", {"type": "login", "email": "alice@gmail.com"})
        await message_handler.handle_message("c1", {"type": "subscribe", "stocks": ["AAPL", "ZZZZ"]})

        await broadcaster.run_cycle()

        ack, update = fake_ws.messages
        assert list(ack["prices"]) == ["AAPL"]
        assert list(update["prices"]) == ["AAPL"]
        assert abs(update["prices"]["AAPL"] - ack["prices"]["AAPL"]) <= 5.0 + 1e-9


@pytest.mark.asyncio
class TestLoop:
    """The recurring background task."""

    async def test_loop_runs_cycles_until_stopped(self, broadcaster, connection_manager, simulator, fake_ws):
        subscribe(connection_manager, fake_ws, "c1", ["MSFT"])

        broadcaster.start()
        await asyncio.sleep(0.1)
        await broadcaster.stop()

        ticks = simulator.tick_count
        assert ticks >= 2
        assert len(fake_ws.sent) == ticks

        await asyncio.sleep(0.05)
        assert simulator.tick_count == ticks

    async def test_start_twice_keeps_one_task(self, broadcaster):
        broadcaster.start()
        task = broadcaster.task
        broadcaster.start()
        assert broadcaster.task is task
        await broadcaster.stop()

    async def test_cycle_errors_do_not_kill_loop(self, broadcaster, simulator):
        calls = []

        def flaky_tick():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")

        simulator.tick = flaky_tick
        broadcaster.start()
        await asyncio.sleep(0.1)
        await broadcaster.stop()

        assert len(calls) >= 2

    async def test_cycles_do_not_overlap(self, simulator, connection_manager):
        broadcaster = PriceBroadcaster(simulator, connection_manager, interval=0.01)
        active = []
        overlaps = []
        real_cycle = broadcaster.run_cycle

        async def slow_cycle():
            if active:
                overlaps.append(1)
            active.append(1)
            await asyncio.sleep(0.03)
            active.pop()
            return await real_cycle()

        broadcaster.run_cycle = slow_cycle
        broadcaster.start()
        await asyncio.sleep(0.2)
        await broadcaster.stop()

        assert overlaps == []
        assert simulator.tick_count >= 2
