"""
CoinScope - Market Dashboard Derived-View Engine

Turns per-segment cryptocurrency market snapshots and small pieces of user
state (search text, sort key, watchlist, comparison assets, take-profit plan)
into consistent, re-derivable views: a sorted/filtered coin table, a
normalized multi-asset performance series and a profit-simulation ledger.
"""

__version__ = "0.1.0"
__author__ = "CoinScope Team"
