from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'Event', 'EventBus',
    'TRANSACTION_ADDED', 'TRANSACTION_REMOVED', 'LEDGER_REPLACED',
    'RECURRING_MATERIALIZED', 'BUDGET_ALERT',
    'budget_alert_handler',
]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        return [handler(event, payload) for handler in list(self._subscribers[name])]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


TRANSACTION_ADDED = "TRANSACTION_ADDED"
TRANSACTION_REMOVED = "TRANSACTION_REMOVED"
LEDGER_REPLACED = "LEDGER_REPLACED"
RECURRING_MATERIALIZED = "RECURRING_MATERIALIZED"
BUDGET_ALERT = "BUDGET_ALERT"


def budget_alert_handler(event: Event, payload: dict) -> dict:
    """Alert when an expense pushes this month's spend past the budget."""
    amount = payload.get("amount", 0)
    budget = payload.get("budget", 0)
    month_spent = payload.get("month_spent", 0)

    if amount < 0 and budget > 0 and month_spent > budget:
        return {
            "alert": f"Monthly budget exceeded: spent {month_spent:,.2f} of {budget:,.2f}",
            "spent": month_spent,
            "budget": budget,
            "overrun": month_spent - budget,
        }
    return {}
