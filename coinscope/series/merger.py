"""
Timestamp outer join of up to three normalized series.

Rows are keyed by exact timestamp equality with no interpolation or
resampling. A series with no sample at a timestamp contributes no keys to
that row, so assets sampled on different grids produce sparse rows.
"""

from collections.abc import Sequence
from typing import Any, Optional

from ..data.models import COMPARISON_LABELS, PricePoint
from .normalizer import normalize

MergedRow = dict[str, Any]


def merge(
    series_a: Sequence[PricePoint],
    series_b: Sequence[PricePoint],
    series_c: Optional[Sequence[PricePoint]] = None,
) -> list[MergedRow]:
    """
    Merge raw series into chart rows.

    Each row looks like {"t": ts, "Ap": pct, "Aprice": value, "Bp": ..., ...}.

    Args:
        series_a: Raw price series for slot A
        series_b: Raw price series for slot B
        series_c: Optional raw price series for slot C

    Returns:
        Rows ascending by timestamp
    """
    labelled = dict(zip(COMPARISON_LABELS, (series_a, series_b, series_c or [])))
    return merge_labelled(labelled)


def merge_labelled(series_by_label: dict[str, Sequence[PricePoint]]) -> list[MergedRow]:
    """Merge any number of raw series under caller-chosen labels."""
    rows: dict[int, MergedRow] = {}

    for label, series in series_by_label.items():
        for point in normalize(series):
            row = rows.setdefault(point.t, {"t": point.t})
            row[f"{label}p"] = point.pct
            row[f"{label}price"] = point.v

    return [rows[t] for t in sorted(rows)]
