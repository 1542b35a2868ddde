"""
Price simulator - generates virtual prices for the supported tickers

Each tick applies a bounded random walk to every ticker:
- delta drawn uniformly from [-max_step, +max_step)
- result clamped to a price floor so prices never reach zero
- rounded to 2 decimal places
"""
import logging
import random
from typing import Dict, Iterable, Optional, Sequence, Tuple

from .tickers import SUPPORTED_TICKERS

logger = logging.getLogger(__name__)


class PriceSimulator:
    """Owns the process-wide price table and advances it on each tick"""

    def __init__(
        self,
        tickers: Sequence[str] = SUPPORTED_TICKERS,
        max_step: float = 5.0,
        floor: float = 1.0,
        initial_range: Tuple[float, float] = (100.0, 1500.0),
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            tickers: Symbols to simulate, in display order
            max_step: Largest absolute price change per tick
            floor: Minimum price after a tick
            initial_range: Half-open range initial prices are drawn from
            rng: Random source, a fresh unseeded one if not given
        """
        self.tickers = tuple(tickers)
        self.max_step = max_step
        self.floor = floor
        self.rng = rng or random.Random()

        low, high = initial_range
        self._prices: Dict[str, float] = {
            ticker: round(low + self.rng.random() * (high - low), 2)
            for ticker in self.tickers
        }
        self.tick_count = 0

    def tick(self):
        """Advance every price by one random-walk step"""
        for ticker in self.tickers:
            change = (self.rng.random() - 0.5) * 2 * self.max_step
            self._prices[ticker] = round(max(self.floor, self._prices[ticker] + change), 2)
        self.tick_count += 1
        logger.debug(f"Tick {self.tick_count}: {self._prices}")

    def get_price(self, ticker: str) -> Optional[float]:
        return self._prices.get(ticker)

    @property
    def prices(self) -> Dict[str, float]:
        return dict(self._prices)

    def snapshot(self, tickers: Optional[Iterable[str]] = None) -> Dict[str, float]:
        """
        Current prices restricted to the given tickers

        Args:
            tickers: Tickers to include, all of them if None. Unknown
                tickers are skipped.

        Returns:
            Ticker to price mapping in display order
        """
        if tickers is None:
            return self.prices
        wanted = set(tickers)
        return {t: self._prices[t] for t in self.tickers if t in wanted}
