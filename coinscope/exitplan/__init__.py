"""Take-profit exit plan simulator"""

from .calculator import (
    AllocationStatus,
    ExitPlanResult,
    ExitPlanSummary,
    TakeProfitResult,
    calculate_exit_plan,
    calculate_row,
)
from .models import ExitPlan, TakeProfitRow
from .numeric import parse_numeric

__all__ = [
    "ExitPlan",
    "TakeProfitRow",
    "parse_numeric",
    "calculate_exit_plan",
    "calculate_row",
    "AllocationStatus",
    "ExitPlanResult",
    "ExitPlanSummary",
    "TakeProfitResult",
]
