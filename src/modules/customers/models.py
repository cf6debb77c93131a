"""Customer directory record.

Only what the order engine needs: a customer is looked up by email when
an order is placed.  ``account_number`` is generated once at registration
(prefix ``222``) and is unique.
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Customer(BaseModel):
    """Customer aggregate root.

    ``email`` is normalised to lowercase on save so look-ups are
    case-insensitive.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    mobile = models.CharField(max_length=20, blank=True, default="")
    account_number = models.CharField(max_length=32, unique=True, editable=False)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.name} ({self.account_number})"
