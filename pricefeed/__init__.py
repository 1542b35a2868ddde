"""
pricefeed - simulated real-time stock price broadcast over WebSockets
"""

__version__ = "1.0.0"
