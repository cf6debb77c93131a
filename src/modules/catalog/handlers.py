"""Event handlers for catalog domain events."""

from __future__ import annotations

import structlog

from modules.catalog.events import ItemPublished
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class ItemPublishedHandler(IEventHandler[ItemPublished]):
    def handle(self, event: ItemPublished) -> None:
        logger.info(
            "item.event.published",
            item_id=str(event.aggregate_id),
            item_code=event.item_code,
            initial_quantity=event.initial_quantity,
        )


item_published_handler = ItemPublishedHandler()
