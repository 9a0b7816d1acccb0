"""Derived coin-table views"""

from .composer import compose, filter_by_text, filter_by_watchlist, sort_coins, toggle_sort
from .headline import MarketHeadline, market_headline

__all__ = [
    "compose",
    "filter_by_text",
    "filter_by_watchlist",
    "sort_coins",
    "toggle_sort",
    "MarketHeadline",
    "market_headline",
]
