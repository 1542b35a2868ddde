"""
Price broadcaster - advances prices and pushes them to subscribers
"""
import asyncio
import logging
import time
from typing import Optional

from pricefeed.market.price_simulator import PriceSimulator
from .connection_manager import ConnectionManager
from .models import PricesMessage

logger = logging.getLogger(__name__)


class PriceBroadcaster:
    """
    Runs the recurring tick-and-push cycle

    Each client only receives the prices it subscribed to. Clients with no
    subscriptions receive nothing at all.
    """
    def __init__(self, simulator: PriceSimulator, connection_manager: ConnectionManager, interval: float = 1.0):
        """
        Args:
            simulator: The price simulator to advance
            connection_manager: The connection manager for client connections
            interval: Seconds between cycles
        """
        self.simulator = simulator
        self.connection_manager = connection_manager
        self.interval = interval

        self.running = False
        self.task: Optional[asyncio.Task] = None

    async def run_cycle(self) -> int:
        """
        Advance prices once and push them to every subscriber

        Returns:
            Number of messages delivered
        """
        self.simulator.tick()

        sent = 0
        for client, tickers in self.connection_manager.get_subscribers():
            # Sends can suspend, so a client may have gone away since the snapshot
            if self.connection_manager.get_client(client.client_id) is None:
                continue
            message = PricesMessage(prices=self.simulator.snapshot(tickers))
            if await self.connection_manager.send_message(client.client_id, message):
                sent += 1
        return sent

    def start(self):
        """Start the broadcast loop on the running event loop"""
        if self.running:
            logger.warning("Price broadcaster already running")
            return

        self.running = True
        self.task = asyncio.create_task(self._broadcast_loop())
        logger.info(f"Price broadcaster started (interval: {self.interval}s)")

    async def stop(self):
        """Stop the broadcast loop and wait for it to finish"""
        self.running = False
        if self.task:
            self.task.cancel()
            try:
                await self.task
            except asyncio.CancelledError:
                pass
            self.task = None
        logger.info("Price broadcaster stopped")

    async def _broadcast_loop(self):
        # Cycles run back to back on one task, so they can never overlap
        sleep_time = self.interval
        while self.running:
            await asyncio.sleep(sleep_time)

            start_time = time.monotonic()
            try:
                await self.run_cycle()
            except Exception as e:
                logger.error(f"Error in broadcast cycle: {e}")

            elapsed = time.monotonic() - start_time
            sleep_time = max(0, self.interval - elapsed)
