"""Catalog service layer (Use Cases).

Publishing an item runs in three steps, in this order:

1. Validate the listing (no side effects on failure).
2. Store the image through the blob-storage collaborator.  If this
   fails no item record is written.
3. Insert the item with a freshly generated item code, retrying on
   code collision, together with its ``ItemPublished`` outbox event.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from modules.catalog.events import ItemPublished
from modules.catalog.models import Item
from modules.core.db import storage_transaction
from modules.core.exceptions import ItemNotFoundError, ItemValidationError
from modules.core.identifiers import IdentifierGenerator, retry_on_collision

if TYPE_CHECKING:
    from django.core.files.base import File

    from modules.catalog.dtos import PublishItemDTO
    from modules.catalog.repositories.interfaces import IItemRepository
    from modules.core.blobs import IImageStorage

logger = structlog.get_logger(__name__)


class CatalogService:
    """Application service for the item catalog.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        item_repository: IItemRepository,
        image_storage: IImageStorage,
        identifiers: Optional[IdentifierGenerator] = None,
    ) -> None:
        self._items = item_repository
        self._images = image_storage
        self._ids = identifiers or IdentifierGenerator()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def publish_item(self, dto: PublishItemDTO, image: File) -> Item:
        """Publish a new item with ``current_quantity = initial_quantity``.

        Raises:
            ItemValidationError: inconsistent listing (e.g. discount
                greater than price).
            ImageStorageError: the image could not be stored.
            DuplicateIdentifierError: every generated item code collided.
            StorageUnavailableError: the database timed out.
        """
        log = logger.bind(item_name=dto.name)
        self._validate_listing(dto)

        image_ref = self._images.store_image(image)
        log.info("item.image_stored", image_ref=image_ref)

        def _create() -> Item:
            item = Item(
                name=dto.name,
                item_code=self._ids.next_item_code(),
                actual_price=dto.actual_price,
                discount_price=dto.discount_price,
                initial_quantity=dto.stock_quantity,
                current_quantity=dto.stock_quantity,
                description=dto.description,
                rating=0,
                image=image_ref,
                sizes=list(dto.sizes),
                colors=list(dto.colors),
                categories=list(dto.categories),
            )
            item.add_domain_event(
                ItemPublished(
                    aggregate_id=item.id,
                    item_code=item.item_code,
                    initial_quantity=item.initial_quantity,
                )
            )
            return self._items.create(item)

        with storage_transaction("publish_item"):
            item = retry_on_collision(_create, label="item_code")

        log.info("item.published", item_code=item.item_code)
        return item

    @staticmethod
    def _validate_listing(dto: PublishItemDTO) -> None:
        if not dto.name:
            raise ItemValidationError("Item name must not be empty.", attr="name")
        if dto.actual_price < 0:
            raise ItemValidationError(
                "Actual price cannot be negative.", attr="actual_price"
            )
        if dto.discount_price < 0:
            raise ItemValidationError(
                "Discount cannot be negative.", attr="discount_price"
            )
        if dto.discount_price > dto.actual_price:
            raise ItemValidationError(
                "Discount cannot exceed the actual price.", attr="discount_price"
            )
        if dto.stock_quantity < 0:
            raise ItemValidationError(
                "Stock quantity cannot be negative.", attr="stock_quantity"
            )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, item_code: str) -> Item:
        """Raises ``ItemNotFoundError`` when no item has *item_code*."""
        item = self._items.get_by_code(item_code)
        if not item:
            raise ItemNotFoundError(f"Item {item_code} not found.")
        return item

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[Item]:
        return self._items.list(filters)

    def find_item_names(self, query: str, limit: int = 10) -> List[str]:
        """Name suggestions for the search box."""
        if not query or not query.strip():
            return []
        return self._items.names_matching(query, limit=limit)
