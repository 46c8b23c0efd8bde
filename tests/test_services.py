from datetime import date

from ledger.domain import Ledger, Transaction
from ledger.insights import DOMINANT_CATEGORY
from ledger.services import DashboardService
from ledger.storage import MemoryStorage
from ledger.store import LedgerStore

TODAY = date(2026, 10, 19)


def make_service():
    ledger = Ledger(
        transactions=(
            Transaction(3, "Coffee", -5, "food", "2026-10-18"),
            Transaction(2, "Train", -45, "travel", "2026-10-10"),
            Transaction(1, "Salary", 2000, "other", "2026-10-01"),
        ),
        monthly_budget=100,
        currency="INR",
    )
    return DashboardService(LedgerStore(MemoryStorage(), ledger))


def test_report_bundles_every_view():
    dashboard = make_service().report(TODAY)
    assert dashboard.currency == "INR"
    assert dashboard.totals.balance == 1950
    assert dashboard.by_category == {"food": 5, "travel": 45}
    assert [m.month_key for m in dashboard.monthly] == ["2026-10"]
    assert dashboard.budget.get_or_else(None).severity == "normal"
    assert dashboard.insights[0].kind == DOMINANT_CATEGORY
    assert len(dashboard.transactions) == 3


def test_report_filters_only_the_transaction_list():
    dashboard = make_service().report(TODAY, search="TRAIN", category="travel")
    assert [t.id for t in dashboard.transactions] == [2]
    assert dashboard.totals.balance == 1950
