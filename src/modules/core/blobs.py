"""Image blob storage used by item publication.

``IImageStorage`` is the contract the catalog depends on.  The default
implementation stores uploads through Django's file storage API under
``ITEM_IMAGE_DIR`` and returns the stored name as the image reference.
"""

from __future__ import annotations

import os
from typing import Protocol

import structlog
from django.core.exceptions import SuspiciousFileOperation
from django.core.files.base import File
from django.core.files.storage import Storage, default_storage
from django.utils.text import get_valid_filename

from modules.core.exceptions import ImageStorageError

logger = structlog.get_logger(__name__)

ITEM_IMAGE_DIR = "items"


class IImageStorage(Protocol):
    """Blob storage collaborator."""

    def store_image(self, payload: File) -> str: ...


class DjangoImageStorage:
    """``IImageStorage`` backed by a Django ``Storage`` (default: MEDIA_ROOT)."""

    def __init__(self, storage: Storage | None = None) -> None:
        self._storage = storage or default_storage

    def store_image(self, payload: File) -> str:
        """Persist *payload* and return its storage reference.

        Raises:
            ImageStorageError: empty payload, unsafe file name, or the
                storage backend failed.
        """
        if payload is None or not getattr(payload, "size", 0):
            raise ImageStorageError("Image file is missing or empty.")

        raw_name = os.path.basename(payload.name or "")
        if not raw_name or ".." in (payload.name or ""):
            raise ImageStorageError("Invalid image file name.")

        try:
            name = os.path.join(ITEM_IMAGE_DIR, get_valid_filename(raw_name))
            stored = self._storage.save(name, payload)
        except (OSError, SuspiciousFileOperation) as exc:
            logger.error("image.store_failed", image_name=raw_name, error=str(exc))
            raise ImageStorageError(f"Could not store image {raw_name}.") from exc

        logger.info("image.stored", image_ref=stored, size=payload.size)
        return stored
