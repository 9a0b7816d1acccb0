"""
Classification of guarded computations.

Divide-by-zero and similar conditions in the series and exit-plan math are
never raised. They fall back to a defined value and the reason is attached
to the result so it can be displayed as data.
"""

from enum import Enum


class ComputationDegenerate(str, Enum):
    """Why a computed value fell back to its default."""
    ZERO_BASELINE = "zero_baseline"              # first sample is 0 or missing
    INSUFFICIENT_POINTS = "insufficient_points"  # fewer than two samples
    ZERO_COST_BASIS = "zero_cost_basis"          # profit percent has no base
    NOTHING_SOLD = "nothing_sold"                # average exit price has no base
