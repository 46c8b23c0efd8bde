"""Readable observations about this month's spending.

Each rule runs independently; no rule suppresses another. When none of
them applies a single placeholder insight is returned, so the result is
never empty.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from ledger.aggregation import expenses_by_category, month_expenses
from ledger.config import COMPARISON_CATEGORY
from ledger.domain import CATEGORY_ICONS, Transaction
from ledger.formatting import format_currency, round_half_up
from ledger.functional import Maybe, Nothing, Some
from ledger.transforms import expense_transactions, in_month, month_key, previous_month_key

DOMINANT_CATEGORY = "dominant_category"
MONTH_OVER_MONTH = "month_over_month"
BUDGET_OVERRUN = "budget_overrun"
NO_DATA = "no_data"

NO_DATA_MESSAGE = "Not enough data for insights yet."


@dataclass(frozen=True)
class Insight:
    kind: str
    message: str
    data: dict = field(default_factory=dict, compare=False)


def dominant_category(
    trans: Iterable[Transaction], today: date
) -> Maybe[Insight]:
    spending = expense_transactions(in_month(trans, month_key(today)))
    if not spending:
        return Nothing()

    total = sum(abs(t.amount) for t in spending)
    if not math.isfinite(total) or total <= 0:
        return Nothing()
    by_category = expenses_by_category(spending)
    # max() keeps the first of equal values, i.e. the first category seen
    top, amount = max(by_category.items(), key=lambda item: item[1])
    percentage = round_half_up(amount / total * 100)
    icon = CATEGORY_ICONS.get(top, "")
    return Some(Insight(
        kind=DOMINANT_CATEGORY,
        message=(
            f"Your biggest expense category this month is {icon} {top} "
            f"({percentage}% of total)."
        ),
        data={"category": top, "amount": amount, "percentage": percentage},
    ))


def month_over_month(
    trans: Iterable[Transaction],
    today: date,
    category: str = COMPARISON_CATEGORY,
) -> Maybe[Insight]:
    trans = tuple(trans)
    current = month_expenses(trans, month_key(today), category)
    previous = month_expenses(trans, previous_month_key(today), category)
    if current <= 0 or previous <= 0:
        return Nothing()

    change = (current - previous) / previous * 100
    if not math.isfinite(change):
        return Nothing()
    direction = "more" if change > 0 else "less"
    percentage = round_half_up(abs(change))
    icon = CATEGORY_ICONS.get(category, "")
    return Some(Insight(
        kind=MONTH_OVER_MONTH,
        message=(
            f"You spent {percentage}% {direction} on {icon} "
            f"{category.capitalize()} compared to last month."
        ),
        data={
            "category": category,
            "current": current,
            "previous": previous,
            "percentage": percentage,
            "direction": direction,
        },
    ))


def budget_overrun(
    trans: Iterable[Transaction], budget: float, today: date, currency: str = "USD"
) -> Maybe[Insight]:
    if not budget or budget <= 0:
        return Nothing()
    spent = month_expenses(trans, month_key(today))
    if spent <= budget:
        return Nothing()
    overrun = spent - budget
    return Some(Insight(
        kind=BUDGET_OVERRUN,
        message=f"⚠️ You've exceeded your monthly budget by {format_currency(overrun, currency)}.",
        data={"spent": spent, "budget": budget, "overrun": overrun},
    ))


def generate_insights(
    trans: Iterable[Transaction],
    budget: float,
    today: date,
    currency: str = "USD",
) -> tuple[Insight, ...]:
    trans = tuple(trans)
    found = tuple(
        m.get_or_else(None)
        for m in (
            dominant_category(trans, today),
            month_over_month(trans, today),
            budget_overrun(trans, budget, today, currency),
        )
        if m.is_some()
    )
    return found or (Insight(kind=NO_DATA, message=NO_DATA_MESSAGE),)
