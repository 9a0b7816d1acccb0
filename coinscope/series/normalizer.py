"""Percent-from-start normalization of price series"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from ..data.models import NormalizedPoint, PricePoint
from ..errors import ComputationDegenerate


@dataclass(frozen=True)
class SeriesStats:
    """Summary of one series for the comparison legend."""
    change_percent: Optional[float]
    last_value: Optional[float]
    points: int
    degenerate: Optional[ComputationDegenerate] = None


def normalize(series: Sequence[PricePoint]) -> list[NormalizedPoint]:
    """
    Re-express a price series as percent change from its first sample.

    pct[i] = (v[i] - v[0]) / v[0] * 100

    Args:
        series: Price points, ascending by timestamp

    Returns:
        Normalized points; every pct is 0 when the first value is 0 or missing
    """
    if not series:
        return []

    first = series[0].value
    if not first:
        return [NormalizedPoint(t=p.timestamp, v=p.value, pct=0.0) for p in series]

    return [
        NormalizedPoint(
            t=p.timestamp,
            v=p.value,
            pct=((p.value - first) / first) * 100 if p.value is not None else 0.0,
        )
        for p in series
    ]


def change_over_period(series: Sequence[PricePoint]) -> Optional[float]:
    """
    Percent change from the first to the last sample.

    Returns:
        None when there are fewer than 2 points or the first value is 0/missing
    """
    if len(series) < 2:
        return None

    first = series[0].value
    last = series[-1].value
    if not first or last is None:
        return None

    return ((last - first) / first) * 100


def last_value(series: Sequence[PricePoint]) -> Optional[float]:
    """Most recent price, None for an empty series."""
    return series[-1].value if series else None


def summarize(series: Sequence[PricePoint]) -> SeriesStats:
    """Change, last price and the reason a change could not be computed."""
    degenerate = None
    if len(series) < 2:
        degenerate = ComputationDegenerate.INSUFFICIENT_POINTS
    elif not series[0].value:
        degenerate = ComputationDegenerate.ZERO_BASELINE

    return SeriesStats(
        change_percent=change_over_period(series),
        last_value=last_value(series),
        points=len(series),
        degenerate=degenerate,
    )
