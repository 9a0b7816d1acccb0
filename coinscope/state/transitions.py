"""
Pure state transitions, one per external event.

Every function takes the current DashboardState and returns the next one.
Requests that would break an invariant (duplicate comparison assets, empty
required slots) return the state unchanged rather than raising, matching how
the selectors ignore such picks.
"""

from collections.abc import Collection
from dataclasses import replace
from typing import Optional

from ..data.models import ComparisonSlot, PricePoint, Segment, SortField
from ..errors import InvalidInputError
from ..exitplan.models import ExitPlan
from ..view.composer import toggle_sort
from .models import DashboardState, LoadStatus, SeriesSource


# Coin table

def set_search(state: DashboardState, text: str) -> DashboardState:
    return replace(state, search_text=text)


def apply_sort_click(state: DashboardState, field: SortField) -> DashboardState:
    return replace(state, sort=toggle_sort(state.sort, field))


def toggle_watchlist_mode(state: DashboardState) -> DashboardState:
    return replace(state, watchlist_active=not state.watchlist_active)


def toggle_watchlist_id(state: DashboardState, coin_id: str) -> DashboardState:
    """Add the id at the end, or remove it if already watchlisted."""
    if coin_id in state.watchlist_ids:
        ids = tuple(i for i in state.watchlist_ids if i != coin_id)
    else:
        ids = state.watchlist_ids + (coin_id,)
    return replace(state, watchlist_ids=ids)


def load_watchlist(state: DashboardState, ids: Collection[str]) -> DashboardState:
    return replace(state, watchlist_ids=tuple(ids))


def select_segment(state: DashboardState, segment: Segment) -> DashboardState:
    return replace(state, segment=segment)


# Market load status

def market_loading(state: DashboardState) -> DashboardState:
    # The previous error stays visible until a load succeeds
    return replace(state, market=LoadStatus(loading=True, error=state.market.error))


def market_loaded(state: DashboardState) -> DashboardState:
    return replace(state, market=LoadStatus())


def market_failed(state: DashboardState, message: str) -> DashboardState:
    return replace(state, market=LoadStatus(loading=False, error=message))


# Comparison

def assign_comparison_asset(state: DashboardState, label: str, asset_id: Optional[str]) -> DashboardState:
    """
    Put an asset in slot A, B or C.

    An empty id is ignored for A and B and clears C. An id already held by
    another slot is ignored.
    """
    slot = state.comparison.slot
    asset_id = asset_id or None

    if label in ("A", "B"):
        other = slot.b if label == "A" else slot.a
        if asset_id is None or asset_id == other or asset_id == slot.c:
            return state
        new_slot = replace(slot, a=asset_id) if label == "A" else replace(slot, b=asset_id)
    elif label == "C":
        if asset_id is not None and asset_id in (slot.a, slot.b):
            return state
        new_slot = replace(slot, c=asset_id)
    else:
        raise InvalidInputError(f"Unknown comparison slot: {label}", field="label", value=label)

    if new_slot == slot:
        return state
    return replace(state, comparison=replace(state.comparison, slot=new_slot))


def swap_comparison(state: DashboardState) -> DashboardState:
    """Exchange A and B, with their series and sources; C stays."""
    comparison = state.comparison
    slot = comparison.slot
    relabel = {"A": "B", "B": "A", "C": "C"}
    return replace(state, comparison=replace(
        comparison,
        slot=ComparisonSlot(a=slot.b, b=slot.a, c=slot.c),
        series_a=comparison.series_b,
        series_b=comparison.series_a,
        sources=tuple(sorted(
            ((relabel[label], source) for label, source in comparison.sources),
            key=lambda item: item[0],
        )),
    ))


def select_range(state: DashboardState, days: int, allowed_days: Collection[int]) -> DashboardState:
    if days not in allowed_days:
        raise InvalidInputError(f"Unsupported range: {days} days", field="days", value=days)
    return replace(state, comparison=replace(state.comparison, days=days))


def comparison_loading(state: DashboardState) -> DashboardState:
    comparison = state.comparison
    return replace(state, comparison=replace(
        comparison, status=LoadStatus(loading=True, error=comparison.status.error)
    ))


def comparison_loaded(state: DashboardState,
                      series_by_label: dict[str, list[PricePoint]],
                      assets_by_label: Optional[dict[str, str]] = None,
                      days: Optional[int] = None) -> DashboardState:
    """
    Apply fetched series; labels without a series are emptied.

    assets_by_label and days describe what was requested and default to the
    current selection. They are stored with the series so a later pick or
    range change can tell the series no longer applies.
    """
    comparison = state.comparison
    if assets_by_label is None:
        assets_by_label = comparison.slot.assigned()
    if days is None:
        days = comparison.days

    sources = tuple(
        (label, SeriesSource(asset_id=assets_by_label[label], days=days))
        for label in sorted(series_by_label)
        if label in assets_by_label
    )
    return replace(state, comparison=replace(
        comparison,
        sources=sources,
        series_a=tuple(series_by_label.get("A", ())),
        series_b=tuple(series_by_label.get("B", ())),
        series_c=tuple(series_by_label.get("C", ())),
        status=LoadStatus(),
    ))


def comparison_failed(state: DashboardState, message: str) -> DashboardState:
    return replace(state, comparison=replace(
        state.comparison, status=LoadStatus(loading=False, error=message)
    ))


# Exit plan

def replace_exit_plan(state: DashboardState, plan: ExitPlan) -> DashboardState:
    return replace(state, exit_plan=plan)
