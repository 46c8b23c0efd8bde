import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Optional

from ledger import backup
from ledger.aggregation import month_expenses
from ledger.config import DEFAULT_CURRENCY
from ledger.domain import EXPENSE, Ledger, RecurringTemplate, Transaction
from ledger.events import (
    BUDGET_ALERT,
    LEDGER_REPLACED,
    RECURRING_MATERIALIZED,
    TRANSACTION_ADDED,
    TRANSACTION_REMOVED,
    EventBus,
    budget_alert_handler,
)
from ledger.functional import (
    Either,
    Left,
    Right,
    parse_amount,
    validate_budget,
    validate_currency,
    validate_transaction,
)
from ledger.recurring import materialize_due
from ledger.storage import Storage
from ledger.transforms import add_template, add_transaction, month_key, new_id, remove_transaction

logger = logging.getLogger(__name__)


def default_bus() -> EventBus:
    bus = EventBus()
    bus.subscribe(TRANSACTION_ADDED, budget_alert_handler)
    return bus


class LedgerStore:
    """Owns the ledger and writes it to storage after every mutation.

    The ledger itself is immutable; each mutation swaps in a new one, so
    readers holding ``store.ledger`` never see partial state.
    """

    def __init__(
        self,
        storage: Storage,
        ledger: Optional[Ledger] = None,
        bus: Optional[EventBus] = None,
        make_id: Callable[[set[int]], int] = new_id,
    ):
        self.storage = storage
        self.bus = bus or default_bus()
        self.make_id = make_id
        self._ledger = ledger or Ledger(currency=DEFAULT_CURRENCY)

    @classmethod
    def open(
        cls,
        storage: Storage,
        today: date,
        bus: Optional[EventBus] = None,
        default_currency: str = DEFAULT_CURRENCY,
        make_id: Callable[[set[int]], int] = new_id,
    ) -> "LedgerStore":
        """Load the stored ledger and materialize this month's recurring instances."""
        ledger = backup.load_snapshot(storage.load(), default_currency)
        logger.info(
            "Loaded ledger with %d transactions and %d recurring templates",
            len(ledger.transactions), len(ledger.recurring),
        )
        store = cls(storage, ledger, bus=bus, make_id=make_id)
        store.process_recurring(today)
        return store

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def _commit(self, ledger: Ledger) -> None:
        self._ledger = ledger
        self.storage.save(backup.to_snapshot(ledger))

    def add(self, t: Transaction) -> Either[dict, Transaction]:
        result = validate_transaction(t)
        if result.is_left():
            return result
        if t.id in self._ledger.ids():
            return Left({
                "error": "duplicate_id",
                "message": f"Transaction id {t.id} already exists",
                "id": t.id,
            })

        recurring = self._ledger.recurring
        if t.is_recurring:
            recurring = add_template(recurring, RecurringTemplate.from_transaction(t))
        self._commit(replace(
            self._ledger,
            transactions=add_transaction(self._ledger.transactions, t),
            recurring=recurring,
        ))
        logger.info("Added transaction %s (%s %.2f)", t.id, t.category, t.amount)

        outcomes = self.bus.publish(TRANSACTION_ADDED, {
            "id": t.id,
            "amount": t.amount,
            "category": t.category,
            "date": t.date,
            "budget": self._ledger.monthly_budget,
            "month_spent": month_expenses(self._ledger.transactions, month_key(t.date)),
        })
        for outcome in outcomes:
            if outcome and "alert" in outcome:
                self.bus.publish(BUDGET_ALERT, outcome)
        return Right(t)

    def submit(
        self,
        description: str,
        amount: Any,
        category: str,
        when: date | str,
        is_recurring: bool = False,
        kind: str = EXPENSE,
    ) -> Either[dict, Transaction]:
        """Build a transaction from raw form values and add it."""
        when = when.isoformat() if isinstance(when, date) else (when or "")
        return parse_amount(amount, kind).map(
            lambda value: Transaction(
                id=self.make_id(self._ledger.ids()),
                description=(description or "").strip(),
                amount=value,
                category=category or "",
                date=when,
                is_recurring=bool(is_recurring),
            )
        ).bind(self.add)

    def remove(self, tid: int) -> bool:
        """Drop the transaction with ``tid``; unknown ids are ignored."""
        remaining = remove_transaction(self._ledger.transactions, tid)
        if len(remaining) == len(self._ledger.transactions):
            return False
        self._commit(replace(self._ledger, transactions=remaining))
        logger.info("Removed transaction %s", tid)
        self.bus.publish(TRANSACTION_REMOVED, {"id": tid})
        return True

    def replace_all(self, ledger: Ledger) -> Ledger:
        self._commit(ledger)
        logger.info("Replaced ledger with %d transactions", len(ledger.transactions))
        self.bus.publish(LEDGER_REPLACED, {"transactions": len(ledger.transactions)})
        return ledger

    def import_backup(self, text: str | bytes) -> Either[dict, Ledger]:
        result = backup.decode(text, self._ledger.currency)
        if result.is_left():
            logger.warning("Rejected backup: %s", result.get_error()["message"])
            return result
        return result.map(self.replace_all)

    def export_backup(self) -> str:
        return backup.encode(self._ledger)

    def set_budget(self, value: Any) -> Either[dict, float]:
        def apply(budget: float) -> float:
            self._commit(replace(self._ledger, monthly_budget=budget))
            return budget

        return validate_budget(value).map(apply)

    def set_currency(self, code: Any) -> Either[dict, str]:
        def apply(currency: str) -> str:
            self._commit(replace(self._ledger, currency=currency))
            return currency

        return validate_currency(code).map(apply)

    def process_recurring(self, today: date) -> bool:
        """Materialize due recurring instances; saves only when something was added."""
        before = self._ledger.transactions
        after = materialize_due(self._ledger.recurring, before, today, self.make_id)
        if after is before:
            return False
        self._commit(replace(self._ledger, transactions=after))
        self.bus.publish(RECURRING_MATERIALIZED, {"count": len(after) - len(before)})
        return True
