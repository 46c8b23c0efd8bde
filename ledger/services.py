from dataclasses import dataclass
from datetime import date

from ledger.aggregation import (
    BudgetProgress,
    MonthSummary,
    Totals,
    budget_progress,
    expenses_by_category,
    monthly_summary,
    totals,
)
from ledger.domain import Transaction
from ledger.filters import filter_transactions
from ledger.functional import Maybe
from ledger.insights import Insight, generate_insights
from ledger.store import LedgerStore


@dataclass(frozen=True)
class Dashboard:
    currency: str
    totals: Totals
    by_category: dict
    monthly: tuple[MonthSummary, ...]
    budget: Maybe[BudgetProgress]
    insights: tuple[Insight, ...]
    transactions: tuple[Transaction, ...]


class DashboardService:
    """Facade computing every read-only view of the store's ledger in one pass."""

    def __init__(self, store: LedgerStore):
        self.store = store

    def report(self, today: date, search: str = "", category: str = "") -> Dashboard:
        ledger = self.store.ledger
        trans = ledger.transactions
        return Dashboard(
            currency=ledger.currency,
            totals=totals(trans),
            by_category=expenses_by_category(trans),
            monthly=monthly_summary(trans),
            budget=budget_progress(trans, ledger.monthly_budget, today),
            insights=generate_insights(trans, ledger.monthly_budget, today, ledger.currency),
            transactions=filter_transactions(trans, search, category),
        )
