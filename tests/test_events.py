from ledger.events import (
    BUDGET_ALERT, TRANSACTION_ADDED, Event, EventBus, budget_alert_handler,
)


def test_event_bus_subscribe_publish_unsubscribe():
    bus = EventBus()
    calls = []

    def handler(event: Event, payload: dict) -> dict:
        calls.append(event.name)
        return {"seen": payload["id"]}

    bus.subscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {"id": 1}) == [{"seen": 1}]
    assert bus.publish(BUDGET_ALERT, {"id": 2}) == []

    bus.unsubscribe(TRANSACTION_ADDED, handler)
    assert bus.publish(TRANSACTION_ADDED, {"id": 3}) == []
    assert calls == [TRANSACTION_ADDED]


def test_budget_alert_handler():
    event = Event(TRANSACTION_ADDED, "2026-10-19T10:00:00", {})
    over = budget_alert_handler(event, {"amount": -200, "budget": 1000, "month_spent": 1100})
    assert over["overrun"] == 100
    assert "Monthly budget exceeded" in over["alert"]

    assert budget_alert_handler(event, {"amount": -200, "budget": 1000, "month_spent": 900}) == {}
    assert budget_alert_handler(event, {"amount": 200, "budget": 1000, "month_spent": 1100}) == {}
    assert budget_alert_handler(event, {"amount": -200, "budget": 0, "month_spent": 1100}) == {}
