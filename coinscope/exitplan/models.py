"""
Exit plan data models.

Numeric fields are kept as the raw text the user typed; parsing happens in
the calculator so invalid entries compute as 0 while the text is echoed back
unchanged. Every editing operation returns a new plan.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from ..config.defaults import ExitPlanParams
from .numeric import format_entry_price, looks_default_entry


def make_row_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass(frozen=True)
class TakeProfitRow:
    """Planned partial sale: sell sell_percent of holdings at target_price."""
    id: str
    target_price: str = ""
    sell_percent: str = ""


@dataclass(frozen=True)
class ExitPlan:
    """Entry price, holdings and ordered take-profit rows."""
    entry_price: str = "1"
    total_tokens: str = "1000"
    rows: tuple[TakeProfitRow, ...] = field(default=())
    coin_id: Optional[str] = None

    @classmethod
    def default(cls, params: Optional[ExitPlanParams] = None,
                id_factory: Callable[[], str] = make_row_id) -> "ExitPlan":
        params = params or ExitPlanParams()
        return cls(
            entry_price=params.default_entry_price,
            total_tokens=params.default_total_tokens,
            rows=tuple(
                TakeProfitRow(id=id_factory(), target_price=price, sell_percent=pct)
                for price, pct in params.default_rows
            ),
        )

    def append_row(self, id_factory: Callable[[], str] = make_row_id) -> "ExitPlan":
        """Add a blank row with a fresh id at the end."""
        return replace(self, rows=self.rows + (TakeProfitRow(id=id_factory()),))

    def remove_row(self, row_id: str) -> "ExitPlan":
        """Drop the row with this id; unknown ids leave the plan unchanged."""
        return replace(self, rows=tuple(r for r in self.rows if r.id != row_id))

    def update_row(self, row_id: str, target_price: Optional[str] = None,
                   sell_percent: Optional[str] = None) -> "ExitPlan":
        """Edit one or both fields of a row; fields left as None are kept."""
        changes = {}
        if target_price is not None:
            changes["target_price"] = target_price
        if sell_percent is not None:
            changes["sell_percent"] = sell_percent

        return replace(self, rows=tuple(
            replace(r, **changes) if r.id == row_id else r for r in self.rows
        ))

    def with_entry_price(self, entry_price: str) -> "ExitPlan":
        return replace(self, entry_price=entry_price)

    def with_total_tokens(self, total_tokens: str) -> "ExitPlan":
        return replace(self, total_tokens=total_tokens)

    def auto_split_three(self, params: Optional[ExitPlanParams] = None,
                         id_factory: Callable[[], str] = make_row_id) -> "ExitPlan":
        """
        Keep the first three rows (filling gaps from the defaults) and split
        holdings 30/30/40 across them.
        """
        params = params or ExitPlanParams()
        split = ("30", "30", "40")
        rows = list(self.rows[:3])
        for price, pct in params.default_rows[len(rows):3]:
            rows.append(TakeProfitRow(id=id_factory(), target_price=price, sell_percent=pct))
        return replace(self, rows=tuple(
            replace(row, sell_percent=pct) for row, pct in zip(rows, split)
        ))

    def with_coin(self, coin_id: Optional[str], coin_price: Optional[float] = None) -> "ExitPlan":
        """
        Select the coin being planned.

        The entry price is filled from the coin's market price only while it
        still looks like a placeholder, so a typed entry is never overwritten.
        """
        plan = replace(self, coin_id=coin_id or None)
        if coin_id and coin_price and coin_price > 0 and looks_default_entry(self.entry_price):
            plan = replace(plan, entry_price=format_entry_price(coin_price))
        return plan
