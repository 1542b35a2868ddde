"""
Subscription registry for connected clients
"""
from typing import Dict, FrozenSet, Iterable, List, Tuple

from pricefeed.market.tickers import is_supported


class SubscriptionRegistry:
    """
    Maps a connection's client ID to its subscribed tickers

    Updates always replace the whole set. There is no add or merge.
    """
    def __init__(self):
        self._subscriptions: Dict[str, FrozenSet[str]] = {}

    def set(self, client_id: str, tickers: Iterable[str]) -> FrozenSet[str]:
        """
        Replace the ticker set for a client, creating the entry if needed

        Args:
            client_id: The client ID
            tickers: Supported tickers only

        Returns:
            The stored set

        Raises:
            ValueError: If any ticker is not supported
        """
        subscription = frozenset(tickers)
        unsupported = [t for t in subscription if not is_supported(t)]
        if unsupported:
            raise ValueError(f"Unsupported tickers: {sorted(map(str, unsupported))}")

        self._subscriptions[client_id] = subscription
        return subscription

    def get(self, client_id: str) -> FrozenSet[str]:
        return self._subscriptions.get(client_id, frozenset())

    def remove(self, client_id: str):
        self._subscriptions.pop(client_id, None)

    def items(self) -> List[Tuple[str, FrozenSet[str]]]:
        """Snapshot of all entries, safe to iterate while entries change"""
        return list(self._subscriptions.items())

    def __contains__(self, client_id: str) -> bool:
        return client_id in self._subscriptions

    def __len__(self) -> int:
        return len(self._subscriptions)
