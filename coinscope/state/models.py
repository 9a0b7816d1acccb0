"""
Dashboard state container.

This module defines the immutable session state the views are derived from.
Each external event produces a new DashboardState through a pure function in
state.transitions; nothing here is mutated in place.
"""

from dataclasses import dataclass, field
from typing import Optional

from ..config.defaults import DefaultConfig, get_default_config
from ..data.models import (
    ComparisonSlot,
    PricePoint,
    Segment,
    SortDirection,
    SortField,
    SortSpec,
)
from ..exitplan.models import ExitPlan


@dataclass(frozen=True)
class LoadStatus:
    """Loading flag plus the last user-facing error, kept until a successful cycle."""
    loading: bool = False
    error: Optional[str] = None


@dataclass(frozen=True)
class SeriesSource:
    """Asset and range a stored series was fetched for."""
    asset_id: str
    days: int


@dataclass(frozen=True)
class ComparisonState:
    """
    Selected comparison assets, range and the last applied series.

    Each stored series keeps the SeriesSource it was fetched for. After a pick
    or range change the old series stays stored but no longer matches the
    selection, so current_series() reports it as missing.
    """
    slot: ComparisonSlot
    days: int = 365
    series_a: tuple[PricePoint, ...] = field(default=())
    series_b: tuple[PricePoint, ...] = field(default=())
    series_c: tuple[PricePoint, ...] = field(default=())
    sources: tuple[tuple[str, SeriesSource], ...] = field(default=())
    status: LoadStatus = field(default_factory=LoadStatus)

    def series_for(self, label: str) -> tuple[PricePoint, ...]:
        return {"A": self.series_a, "B": self.series_b, "C": self.series_c}[label]

    def source_for(self, label: str) -> Optional[SeriesSource]:
        return dict(self.sources).get(label)

    def has_current_series(self, label: str) -> bool:
        """True when the stored series belongs to the selected asset and range."""
        asset_id = self.slot.get(label)
        if asset_id is None:
            return False
        return self.source_for(label) == SeriesSource(asset_id=asset_id, days=self.days)

    def current_series(self, label: str) -> tuple[PricePoint, ...]:
        """Stored series for a label, or empty when it belongs to an earlier selection."""
        return self.series_for(label) if self.has_current_series(label) else ()


@dataclass(frozen=True)
class DashboardState:
    """Everything the derived views depend on, apart from cached snapshots."""
    segment: Segment
    comparison: ComparisonState
    exit_plan: ExitPlan
    search_text: str = ""
    sort: SortSpec = field(default_factory=SortSpec)
    watchlist_active: bool = False
    watchlist_ids: tuple[str, ...] = field(default=())
    market: LoadStatus = field(default_factory=LoadStatus)


def initial_state(config: Optional[DefaultConfig] = None,
                  watchlist_ids: tuple[str, ...] = ()) -> DashboardState:
    """Session start state built from configuration defaults."""
    config = config or get_default_config()

    return DashboardState(
        segment=Segment(page=config.segments.default_page, size=config.segments.size),
        comparison=ComparisonState(
            slot=ComparisonSlot(a=config.compare.default_a, b=config.compare.default_b),
            days=config.compare.default_days,
        ),
        exit_plan=ExitPlan.default(config.exit_plan),
        sort=SortSpec(
            field=SortField(config.view.default_sort_field),
            direction=SortDirection(config.view.default_sort_direction),
        ),
        watchlist_ids=tuple(watchlist_ids),
    )
