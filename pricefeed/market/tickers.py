"""
Supported ticker symbols
"""
from typing import Any, FrozenSet, Iterable, Tuple

# Display order matters for the UI and for payload ordering
SUPPORTED_TICKERS: Tuple[str, ...] = (
    "GOOG", "TSLA", "AMZN", "META", "NVDA",
    "MSFT", "AAPL", "NFLX", "IBM", "ORCL",
)

_SUPPORTED_SET: FrozenSet[str] = frozenset(SUPPORTED_TICKERS)


def is_supported(ticker: Any) -> bool:
    return isinstance(ticker, str) and ticker in _SUPPORTED_SET


def filter_supported(requested: Iterable[Any]) -> FrozenSet[str]:
    """
    Restrict a requested ticker list to the supported set

    Args:
        requested: Ticker symbols as sent by a client, possibly containing
            unknown symbols or non-string values

    Returns:
        The supported tickers found in the request
    """
    return frozenset(t for t in requested if is_supported(t))
