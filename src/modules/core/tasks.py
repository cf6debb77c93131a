"""Async tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction
from django.db.models import Q

from modules.core.models import EventStatus, OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

RELAY_BATCH_SIZE = 100


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = RELAY_BATCH_SIZE) -> dict:
    """Publish pending outbox rows on the in-process event bus.

    Rows are processed oldest first.  ``FAILED`` rows are picked up again
    until their ``retry_count`` reaches ``OUTBOX_MAX_RETRIES``.  The batch
    is locked with ``SKIP LOCKED`` for the whole run, so overlapping
    relays never publish the same row twice.  A handler failure marks
    only that row as ``FAILED``; the rest of the batch keeps going.
    """
    relayable = Q(status=EventStatus.PENDING) | Q(
        status=EventStatus.FAILED, retry_count__lt=settings.OUTBOX_MAX_RETRIES
    )
    published = failed = 0
    with transaction.atomic():
        batch = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(relayable)
            .order_by("created_at")[:batch_size]
        )
        for row in batch:
            try:
                with transaction.atomic():
                    event_bus.publish(event_bus.rebuild(row.event_type, row.payload))
            except Exception as exc:  # noqa: BLE001 - failure is recorded on the row
                row.mark_as_failed(str(exc))
                failed += 1
                logger.error(
                    "outbox.relay_failed",
                    event_type=row.event_type,
                    aggregate_id=row.aggregate_id,
                    retry_count=row.retry_count,
                    error=str(exc),
                )
                continue
            row.mark_as_published()
            published += 1

    logger.info("outbox.relayed", published=published, failed=failed)
    return {"published": published, "failed": failed}
