"""Outbox writing and the relay task."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.core.models import EventStatus, OutboxEvent
from modules.core.outbox import record_events, serialize_event_payload
from modules.core.tasks import relay_outbox_events
from modules.orders.events import OrderCanceled, OrderPlaced
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


def test_serialized_payload_is_plain_json():
    event = OrderPlaced(
        aggregate_id=uuid4(),
        order_number="55512345",
        item_code="ABC",
        quantity=3,
        total_price="240.00",
    )
    payload = serialize_event_payload(event)
    assert payload["aggregate_id"] == str(event.aggregate_id)
    assert payload["event_name"] == "OrderPlaced"
    assert isinstance(payload["occurred_on"], str)
    assert payload["quantity"] == 3


def test_record_events_creates_pending_rows():
    events = [
        OrderCanceled(aggregate_id=uuid4(), order_number="55500001", restocked_units=2)
    ]
    assert record_events(events, topic="orders") == 1
    row = OutboxEvent.objects.get()
    assert row.status == EventStatus.PENDING
    assert row.event_type == "OrderCanceled"
    assert row.topic == "orders"


def test_relay_publishes_and_marks_rows():
    event = OrderPlaced(aggregate_id=uuid4(), order_number="55500002", quantity=1)
    record_events([event], topic="orders")

    result = relay_outbox_events.delay().get()

    assert result == {"published": 1, "failed": 0}
    row = OutboxEvent.objects.get()
    assert row.status == EventStatus.PUBLISHED
    assert row.processed_at is not None


def test_relay_marks_unknown_event_type_as_failed():
    OutboxEvent.objects.create(
        event_type="NoSuchEvent",
        aggregate_id=str(uuid4()),
        payload={"aggregate_id": str(uuid4())},
        topic="orders",
    )

    result = relay_outbox_events()

    assert result == {"published": 0, "failed": 1}
    row = OutboxEvent.objects.get()
    assert row.status == EventStatus.FAILED
    assert row.retry_count == 1
    assert "NoSuchEvent" in row.error_message


def test_relay_failure_does_not_stop_the_batch(monkeypatch):
    record_events(
        [
            OrderPlaced(aggregate_id=uuid4(), order_number="55500003", quantity=1),
            OrderCanceled(aggregate_id=uuid4(), order_number="55500004"),
        ],
        topic="orders",
    )
    original = event_bus.publish

    def flaky_publish(event):
        if isinstance(event, OrderPlaced):
            raise RuntimeError("handler crashed")
        original(event)

    monkeypatch.setattr(event_bus, "publish", flaky_publish)

    result = relay_outbox_events()

    assert result == {"published": 1, "failed": 1}
    assert set(OutboxEvent.objects.values_list("status", flat=True)) == {
        EventStatus.PUBLISHED,
        EventStatus.FAILED,
    }


def test_failed_rows_are_retried_until_the_cap(settings):
    settings.OUTBOX_MAX_RETRIES = 3
    record_events(
        [OrderPlaced(aggregate_id=uuid4(), order_number="55500005", quantity=1)],
        topic="orders",
    )
    row = OutboxEvent.objects.get()
    row.mark_as_failed("broker down")
    exhausted = OutboxEvent.objects.create(
        event_type="OrderPlaced",
        aggregate_id=str(uuid4()),
        payload={"aggregate_id": str(uuid4()), "order_number": "55500006"},
        topic="orders",
        status=EventStatus.FAILED,
        retry_count=3,
    )

    result = relay_outbox_events()

    assert result == {"published": 1, "failed": 0}
    row.refresh_from_db()
    exhausted.refresh_from_db()
    assert row.status == EventStatus.PUBLISHED
    assert exhausted.status == EventStatus.FAILED
    assert exhausted.retry_count == 3


def test_relay_is_scheduled_on_beat(settings):
    tasks = [entry["task"] for entry in settings.CELERY_BEAT_SCHEDULE.values()]
    assert "core.relay_outbox_events" in tasks
