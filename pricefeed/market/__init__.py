"""
Simulated market data
"""
from .price_simulator import PriceSimulator
from .tickers import SUPPORTED_TICKERS, filter_supported, is_supported

__all__ = [
    'PriceSimulator',
    'SUPPORTED_TICKERS',
    'filter_supported',
    'is_supported',
]
