from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from functools import reduce
from typing import Iterable, Optional

from ledger.config import (
    BUDGET_DANGER_PERCENT,
    BUDGET_WARNING_PERCENT,
    MONTHLY_SUMMARY_LIMIT,
)
from ledger.domain import Transaction
from ledger.formatting import format_month
from ledger.functional import Maybe, Nothing, Some
from ledger.transforms import expense_transactions, in_month, month_key

NORMAL = "normal"
WARNING = "warning"
DANGER = "danger"


@dataclass(frozen=True)
class Totals:
    balance: float
    income: float
    expenses: float  # signed, <= 0


@dataclass(frozen=True)
class MonthSummary:
    month_key: str
    label: str
    income: float
    expenses: float  # signed, <= 0
    net: float


@dataclass(frozen=True)
class BudgetProgress:
    budget: float
    spent: float
    percentage: float
    remaining: float
    severity: str

    @property
    def fill_width(self) -> float:
        return min(self.percentage, 100.0)


def totals(trans: Iterable[Transaction]) -> Totals:
    def step(acc: Totals, t: Transaction) -> Totals:
        if t.amount > 0:
            return Totals(acc.balance + t.amount, acc.income + t.amount, acc.expenses)
        return Totals(acc.balance + t.amount, acc.income, acc.expenses + t.amount)

    return reduce(step, trans, Totals(0.0, 0.0, 0.0))


def expenses_by_category(trans: Iterable[Transaction]) -> dict[str, float]:
    """Absolute expense per category over the whole history.

    Keys keep the order in which each category first appears.
    """
    result: dict[str, float] = {}
    for t in expense_transactions(trans):
        result[t.category] = result.get(t.category, 0.0) + abs(t.amount)
    return result


def month_expenses(
    trans: Iterable[Transaction], key: str, category: Optional[str] = None
) -> float:
    return sum(
        abs(t.amount)
        for t in expense_transactions(in_month(trans, key))
        if category is None or t.category == category
    )


def monthly_summary(
    trans: Iterable[Transaction], limit: int = MONTHLY_SUMMARY_LIMIT
) -> tuple[MonthSummary, ...]:
    income: dict[str, float] = defaultdict(float)
    expenses: dict[str, float] = defaultdict(float)
    keys: list[str] = []

    for t in trans:
        if t is None or not t.date:
            continue
        key = month_key(t.date)
        if key not in income and key not in expenses:
            keys.append(key)
        if t.amount > 0:
            income[key] += t.amount
        else:
            expenses[key] += t.amount

    ordered = sorted(keys, reverse=True)[: max(0, limit)]
    return tuple(
        MonthSummary(
            month_key=k,
            label=format_month(k),
            income=income[k],
            expenses=expenses[k],
            net=income[k] + expenses[k],
        )
        for k in ordered
    )


def severity(percentage: float) -> str:
    if percentage >= BUDGET_DANGER_PERCENT:
        return DANGER
    if percentage >= BUDGET_WARNING_PERCENT:
        return WARNING
    return NORMAL


def budget_progress(
    trans: Iterable[Transaction], budget: float, today: date
) -> Maybe[BudgetProgress]:
    """Progress of this month's spending against the budget.

    Nothing when no budget is set.
    """
    if not budget or budget <= 0:
        return Nothing()
    spent = month_expenses(trans, month_key(today))
    percentage = spent * 100 / budget
    return Some(BudgetProgress(
        budget=budget,
        spent=spent,
        percentage=percentage,
        remaining=max(budget - spent, 0.0),
        severity=severity(percentage),
    ))
