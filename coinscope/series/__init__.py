"""Series normalization and merging for the comparison chart"""

from .merger import merge, merge_labelled
from .normalizer import SeriesStats, change_over_period, last_value, normalize, summarize

__all__ = [
    "normalize",
    "change_over_period",
    "last_value",
    "summarize",
    "SeriesStats",
    "merge",
    "merge_labelled",
]
