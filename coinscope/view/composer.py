"""Coin table composition: text search, watchlist filter and stable sort"""

from collections.abc import Collection, Iterable

from ..data.models import CoinSnapshot, SortDirection, SortField, SortSpec


def filter_by_text(coins: Iterable[CoinSnapshot], search_text: str) -> list[CoinSnapshot]:
    """
    Keep coins whose name or symbol contains the query, case-insensitively.

    A blank or whitespace-only query keeps everything.
    """
    query = (search_text or "").strip().lower()
    if not query:
        return list(coins)
    return [c for c in coins if query in c.name.lower() or query in c.symbol.lower()]


def filter_by_watchlist(coins: Iterable[CoinSnapshot], watchlist_ids: Collection[str]) -> list[CoinSnapshot]:
    """Keep coins whose id is watchlisted."""
    ids = set(watchlist_ids)
    return [c for c in coins if c.id in ids]


def sort_coins(coins: Iterable[CoinSnapshot], sort_spec: SortSpec) -> list[CoinSnapshot]:
    """
    Sort on one numeric field.

    Equal keys keep their input order in both directions; sorted() is stable
    and reverse=True preserves the order of ties.
    """
    field = SortField(sort_spec.field).value
    descending = SortDirection(sort_spec.direction) is SortDirection.DESC
    return sorted(coins, key=lambda c: getattr(c, field), reverse=descending)


def compose(
    base: Iterable[CoinSnapshot],
    search_text: str,
    watchlist_active: bool,
    watchlist_ids: Collection[str],
    sort_spec: SortSpec,
) -> list[CoinSnapshot]:
    """
    Derive the visible coin table.

    When watchlist_active is set the caller must pass the union of every
    loaded segment as base, so watchlisted coins outside the viewed segment
    still appear.

    Args:
        base: Coins to draw from; never mutated
        search_text: Free-text query on name or symbol
        watchlist_active: Restrict to watchlisted ids
        watchlist_ids: Watchlisted coin ids
        sort_spec: Sort field and direction

    Returns:
        A fresh list
    """
    visible = filter_by_text(base, search_text)
    if watchlist_active:
        visible = filter_by_watchlist(visible, watchlist_ids)
    return sort_coins(visible, sort_spec)


def toggle_sort(current: SortSpec, field: SortField) -> SortSpec:
    """Next sort after a column click: same column flips, a new column starts descending."""
    field = SortField(field)
    if current.field is field:
        return SortSpec(field=field, direction=current.direction.flipped())
    return SortSpec(field=field, direction=SortDirection.DESC)
