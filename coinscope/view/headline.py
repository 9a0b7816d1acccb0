"""Headline stats shown above the coin table"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from ..data.models import CoinSnapshot

BITCOIN_ID = "bitcoin"


@dataclass(frozen=True)
class MarketHeadline:
    """Bitcoin quote plus the biggest 24h movers among loaded coins."""
    bitcoin: Optional[CoinSnapshot] = None
    top_gainer: Optional[CoinSnapshot] = None
    top_loser: Optional[CoinSnapshot] = None


def market_headline(coins: Sequence[CoinSnapshot]) -> MarketHeadline:
    """
    Pick the headline coins.

    Ties on 24h change resolve to the higher-ranked coin. Gainer and loser are
    None when nothing moved in that direction.
    """
    bitcoin = next((c for c in coins if c.id == BITCOIN_ID), None)

    gainer = None
    loser = None
    for coin in coins:
        if coin.change_24h > 0 and (gainer is None or coin.change_24h > gainer.change_24h):
            gainer = coin
        if coin.change_24h < 0 and (loser is None or coin.change_24h < loser.change_24h):
            loser = coin

    return MarketHeadline(bitcoin=bitcoin, top_gainer=gainer, top_loser=loser)
