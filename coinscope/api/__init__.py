"""
Market-data provider access.

Async HTTP client for the markets-list and market-chart endpoints.
"""

from .client import MarketDataClient

__all__ = ["MarketDataClient"]
