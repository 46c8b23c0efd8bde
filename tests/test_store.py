from datetime import date
from itertools import count

from ledger.backup import encode
from ledger.domain import Ledger, Transaction
from ledger.events import BUDGET_ALERT, LEDGER_REPLACED, TRANSACTION_REMOVED, EventBus
from ledger.storage import MemoryStorage
from ledger.store import LedgerStore

TODAY = date(2026, 10, 19)


def make_store(snapshot=None, bus=None):
    ids = count(1)
    storage = MemoryStorage(snapshot)
    store = LedgerStore.open(storage, TODAY, bus=bus, make_id=lambda taken: next(ids))
    return store, storage


def test_open_empty_storage():
    store, storage = make_store()
    assert store.ledger == Ledger(currency="USD")
    assert storage.saves == 0


def test_submit_adds_newest_first_and_persists():
    store, storage = make_store()
    first = store.submit("Groceries", "40", "food", date(2026, 10, 1))
    second = store.submit("Salary", 3000, "other", "2026-10-02", kind="income")

    assert first.is_right() and second.is_right()
    assert [t.description for t in store.ledger.transactions] == ["Salary", "Groceries"]
    assert store.ledger.transactions[1].amount == -40
    assert store.ledger.transactions[0].amount == 3000
    assert storage.saves == 2
    assert len(storage.load()["transactions"]) == 2


def test_invalid_submit_leaves_ledger_unchanged():
    store, storage = make_store()
    for args in (
        ("", 10, "food", "2026-10-01"),
        ("Lunch", "ten", "food", "2026-10-01"),
        ("Lunch", 10, "", "2026-10-01"),
        ("Lunch", 10, "food", ""),
    ):
        assert store.submit(*args).is_left()
    assert store.ledger.transactions == ()
    assert storage.saves == 0


def test_duplicate_id_rejected():
    store, _ = make_store()
    t = Transaction(5, "Lunch", -10, "food", "2026-10-01")
    assert store.add(t).is_right()
    assert store.add(t).get_error()["error"] == "duplicate_id"
    assert len(store.ledger.transactions) == 1


def test_recurring_submit_creates_template():
    store, _ = make_store()
    t = store.submit("Rent", 900, "rent", "2026-10-01", is_recurring=True).get_or_else(None)
    assert len(store.ledger.recurring) == 1
    assert store.ledger.recurring[0].id == t.id
    # manual entry does not satisfy this month's recurring check
    assert store.process_recurring(TODAY) is True
    assert store.process_recurring(TODAY) is False
    generated = store.ledger.transactions[0]
    assert generated.recurring_id == t.id
    assert generated.date == TODAY.isoformat()


def test_open_materializes_due_templates_once():
    snapshot = {
        "transactions": [],
        "recurringTransactions": [
            {"id": 100, "description": "Gym", "amount": -30, "category": "other", "date": "2026-08-01"},
        ],
        "monthlyBudget": 0,
        "selectedCurrency": "INR",
    }
    store, storage = make_store(snapshot)
    assert len(store.ledger.transactions) == 1
    assert store.ledger.transactions[0].description == "Gym (Recurring)"
    assert storage.saves == 1

    reopened = LedgerStore.open(storage, TODAY)
    assert len(reopened.ledger.transactions) == 1
    assert storage.saves == 1
    assert reopened.ledger.currency == "INR"


def test_remove_is_silent_for_unknown_ids():
    bus = EventBus()
    removed = []
    bus.subscribe(TRANSACTION_REMOVED, lambda e, p: removed.append(p["id"]) or {})
    store, storage = make_store(bus=bus)
    t = store.submit("Lunch", 10, "food", "2026-10-01").get_or_else(None)

    saves = storage.saves
    assert store.remove(999) is False
    assert storage.saves == saves
    assert store.remove(t.id) is True
    assert store.ledger.transactions == ()
    assert removed == [t.id]


def test_budget_and_currency():
    store, storage = make_store()
    assert store.set_budget(0).is_left()
    assert store.ledger.monthly_budget == 0
    assert store.set_budget("1000").get_or_else(None) == 1000
    assert storage.load()["monthlyBudget"] == 1000
    assert store.set_currency("eur").get_or_else(None) == "EUR"
    assert store.set_currency("").is_left()
    assert store.ledger.currency == "EUR"


def test_budget_alert_published_on_overspend():
    store, _ = make_store()
    alerts = []
    store.bus.subscribe(BUDGET_ALERT, lambda e, p: alerts.append(p) or {})
    store.set_budget(100)
    store.submit("Dinner", 80, "food", "2026-10-10")
    assert alerts == []
    store.submit("Taxi", 30, "travel", "2026-10-11")
    assert len(alerts) == 1
    assert alerts[0]["overrun"] == 10


def test_import_overwrites_everything():
    bus = EventBus()
    replaced = []
    bus.subscribe(LEDGER_REPLACED, lambda e, p: replaced.append(p) or {})
    store, storage = make_store(bus=bus)
    store.submit("Old", 5, "food", "2026-10-01")

    incoming = Ledger(
        transactions=(Transaction(77, "Imported", -12, "shopping", "2026-06-01"),),
        monthly_budget=300,
        currency="EUR",
    )
    result = store.import_backup(encode(incoming))
    assert result.is_right()
    assert store.ledger == incoming
    assert storage.load()["selectedCurrency"] == "EUR"
    assert replaced == [{"transactions": 1}]


def test_failed_import_changes_nothing():
    store, storage = make_store()
    store.submit("Keep me", 5, "food", "2026-10-01")
    before, saves = store.ledger, storage.saves

    for text in ("{broken", "[]", '{"transactions": [{"amount": 1, "date": "2026-01-01"}]}'):
        assert store.import_backup(text).is_left()

    assert store.ledger is before
    assert storage.saves == saves


def test_export_then_import_reproduces_ledger():
    store, _ = make_store()
    store.submit("Rent", 900, "rent", "2026-10-01", is_recurring=True)
    store.set_budget(1200)
    exported = store.export_backup()

    other, _ = make_store()
    other.import_backup(exported)
    assert other.export_backup() == exported


def test_import_with_list_id_is_rejected():
    store, storage = make_store()
    saves = storage.saves
    result = store.import_backup('{"transactions": [{"id": [1], "amount": -5, "date": "2026-10-01"}]}')
    assert result.get_error()["field"] == "id"
    assert storage.saves == saves
    assert store.submit("Lunch", 10, "food", TODAY).is_right()
