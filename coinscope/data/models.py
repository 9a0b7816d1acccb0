"""
Canonical data models for market snapshots and price series.

This module defines immutable data structures that represent clean market
data after mapping from the provider's response format.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class CoinSnapshot:
    """Point-in-time market record for one asset."""
    id: str                  # Provider's stable identifier, e.g. "bitcoin"
    name: str
    symbol: str              # Upper-cased ticker
    price: float
    change_24h: float        # Signed percent
    market_cap: float
    volume_24h: float
    image: str = ""
    sparkline: tuple[float, ...] = field(default=())

    @property
    def label(self) -> str:
        """Display label, e.g. "Bitcoin (BTC)"."""
        return f"{self.name} ({self.symbol.upper()})"


@dataclass(frozen=True)
class Segment:
    """Ranked partition of the tracked universe; page 1 covers ranks 1..size."""
    page: int = 1
    size: int = 100

    def __post_init__(self):
        if self.page < 1:
            raise ValueError(f"Segment page must be >= 1, got {self.page}")
        if self.size < 1:
            raise ValueError(f"Segment size must be >= 1, got {self.size}")

    @property
    def key(self) -> str:
        return f"{self.page}:{self.size}"

    @property
    def first_rank(self) -> int:
        return (self.page - 1) * self.size + 1

    @property
    def last_rank(self) -> int:
        return self.page * self.size

    @property
    def label(self) -> str:
        """Cumulative label as shown on the segment tabs, e.g. "Top 200"."""
        return f"Top {self.last_rank}"


class SortField(str, Enum):
    """Numeric CoinSnapshot fields the coin table can sort on."""
    PRICE = "price"
    CHANGE_24H = "change_24h"
    MARKET_CAP = "market_cap"
    VOLUME_24H = "volume_24h"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.ASC if self is SortDirection.DESC else SortDirection.DESC


@dataclass(frozen=True)
class SortSpec:
    """Sort key and direction for the coin table."""
    field: SortField = SortField.MARKET_CAP
    direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class PricePoint:
    """Single sample of an asset's price series."""
    timestamp: int           # Epoch milliseconds
    value: Optional[float]


@dataclass(frozen=True)
class NormalizedPoint:
    """Price sample re-expressed as percent change from the first sample."""
    t: int
    v: Optional[float]
    pct: float


COMPARISON_LABELS = ("A", "B", "C")


@dataclass(frozen=True)
class ComparisonSlot:
    """Up to three distinct asset ids selected for comparison."""
    a: str
    b: str
    c: Optional[str] = None

    def __post_init__(self):
        if not self.a or not self.b:
            raise ValueError("Comparison assets A and B are required")
        if self.a == self.b:
            raise ValueError(f"Comparison assets A and B must differ, got {self.a!r} twice")
        if self.c is not None and self.c in (self.a, self.b):
            raise ValueError(f"Comparison asset C duplicates {self.c!r}")

    def get(self, label: str) -> Optional[str]:
        return {"A": self.a, "B": self.b, "C": self.c}[label]

    def assigned(self) -> dict[str, str]:
        """Label -> asset id for every filled slot, in A/B/C order."""
        return {label: self.get(label) for label in COMPARISON_LABELS if self.get(label)}
