from datetime import timedelta

import pytest
import uuid6
from django.utils import timezone

from modules.core.models import EventStatus, OutboxEvent
from modules.customers.models import Customer

pytestmark = pytest.mark.unit


class TestBaseModel:
    def test_primary_key_is_uuid7(self):
        customer = Customer.objects.create(
            name="Pk", email="pk@example.com", account_number="2223"
        )
        assert customer.id.version == 7
        assert isinstance(customer.id, type(uuid6.uuid7()))

    def test_update_fields_also_bumps_updated_at(self):
        customer = Customer.objects.create(
            name="Ts", email="ts@example.com", account_number="2224"
        )
        before = timezone.now() - timedelta(days=1)
        Customer.objects.filter(pk=customer.pk).update(updated_at=before)
        customer.name = "Ts2"
        customer.save(update_fields=["name"])
        customer.refresh_from_db()
        assert customer.updated_at > before


class TestOutboxEvent:
    def test_mark_as_failed_counts_retries(self):
        row = OutboxEvent.objects.create(
            event_type="OrderPlaced", aggregate_id="x", payload={}, topic="orders"
        )
        row.mark_as_failed("first")
        row.mark_as_failed("second")
        row.refresh_from_db()
        assert row.status == EventStatus.FAILED
        assert row.retry_count == 2
        assert row.error_message == "second"
