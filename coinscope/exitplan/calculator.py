"""Exit plan calculator: per-row and aggregate proceeds, profit and holdings"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..errors import ComputationDegenerate
from .models import ExitPlan, TakeProfitRow
from .numeric import parse_numeric

OVER_ALLOCATION_MESSAGE = "Total sell % is above 100%. Reduce percentages."
UNDER_ALLOCATION_MESSAGE = "Total sell % below 100%: some tokens remain unsold."


class AllocationStatus(str, Enum):
    """How the planned sell percentages add up; advisory only."""
    FULL = "full"
    OVER = "over"
    UNDER = "under"


@dataclass(frozen=True)
class TakeProfitResult:
    """One take-profit row with its derived amounts and the raw inputs."""
    id: str
    target_price_text: str
    sell_percent_text: str
    target_price: float
    sell_percent: float
    tokens_sold: float
    proceeds: float
    cost_basis: float
    profit: float
    profit_percent: float


@dataclass(frozen=True)
class ExitPlanSummary:
    """Aggregate ledger across every row."""
    sold_percent: float
    sold_tokens: float
    total_proceeds: float
    total_cost_basis: float
    total_profit: float
    profit_percent: float
    remaining_tokens: float
    average_exit_price: float
    invested: float
    allocation: AllocationStatus
    allocation_message: Optional[str]
    degenerate: tuple[ComputationDegenerate, ...] = ()

    @property
    def over_allocated(self) -> bool:
        return self.allocation is AllocationStatus.OVER


@dataclass(frozen=True)
class ExitPlanResult:
    """Full ledger for display."""
    entry_price: float
    total_tokens: float
    rows: tuple[TakeProfitResult, ...]
    summary: ExitPlanSummary


def calculate_row(row: TakeProfitRow, entry_price: float, total_tokens: float) -> TakeProfitResult:
    """
    Derive one row.

    tokens_sold = total_tokens * sell_percent / 100, never clamped, so rows
    that together exceed 100% still report their full amounts.
    """
    target_price = parse_numeric(row.target_price)
    sell_percent = parse_numeric(row.sell_percent)

    tokens_sold = total_tokens * sell_percent / 100
    proceeds = tokens_sold * target_price
    cost_basis = tokens_sold * entry_price
    profit = proceeds - cost_basis
    profit_percent = profit / cost_basis * 100 if cost_basis > 0 else 0.0

    return TakeProfitResult(
        id=row.id,
        target_price_text=row.target_price,
        sell_percent_text=row.sell_percent,
        target_price=target_price,
        sell_percent=sell_percent,
        tokens_sold=tokens_sold,
        proceeds=proceeds,
        cost_basis=cost_basis,
        profit=profit,
        profit_percent=profit_percent,
    )


def classify_allocation(sold_percent: float) -> tuple[AllocationStatus, Optional[str]]:
    if sold_percent > 100:
        return AllocationStatus.OVER, OVER_ALLOCATION_MESSAGE
    if sold_percent < 100:
        return AllocationStatus.UNDER, UNDER_ALLOCATION_MESSAGE
    return AllocationStatus.FULL, None


def summarize_rows(rows: tuple[TakeProfitResult, ...], entry_price: float,
                   total_tokens: float) -> ExitPlanSummary:
    """
    Aggregate derived rows.

    Only remaining_tokens is floored at 0; totals reflect every row as entered.
    """
    sold_percent = sum(r.sell_percent for r in rows)
    sold_tokens = sum(r.tokens_sold for r in rows)
    total_proceeds = sum(r.proceeds for r in rows)
    total_cost_basis = sold_tokens * entry_price
    total_profit = total_proceeds - total_cost_basis

    degenerate = []
    if total_cost_basis > 0:
        profit_percent = total_profit / total_cost_basis * 100
    else:
        profit_percent = 0.0
        degenerate.append(ComputationDegenerate.ZERO_COST_BASIS)

    if sold_tokens > 0:
        average_exit_price = total_proceeds / sold_tokens
    else:
        average_exit_price = 0.0
        degenerate.append(ComputationDegenerate.NOTHING_SOLD)

    allocation, message = classify_allocation(sold_percent)

    return ExitPlanSummary(
        sold_percent=sold_percent,
        sold_tokens=sold_tokens,
        total_proceeds=total_proceeds,
        total_cost_basis=total_cost_basis,
        total_profit=total_profit,
        profit_percent=profit_percent,
        remaining_tokens=max(total_tokens - sold_tokens, 0.0),
        average_exit_price=average_exit_price,
        invested=entry_price * total_tokens,
        allocation=allocation,
        allocation_message=message,
        degenerate=tuple(degenerate),
    )


def calculate_exit_plan(plan: ExitPlan) -> ExitPlanResult:
    """Compute the full ledger for a plan. Never raises on bad input."""
    entry_price = parse_numeric(plan.entry_price)
    total_tokens = parse_numeric(plan.total_tokens)

    rows = tuple(calculate_row(row, entry_price, total_tokens) for row in plan.rows)

    return ExitPlanResult(
        entry_price=entry_price,
        total_tokens=total_tokens,
        rows=rows,
        summary=summarize_rows(rows, entry_price, total_tokens),
    )
