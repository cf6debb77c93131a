"""Identifier generation for orders, customer accounts and items.

The generator never looks at existing records: uniqueness is enforced by
the UNIQUE constraints on ``order_number``, ``account_number`` and
``item_code``.  A collision surfaces as ``DuplicateIdentifierError`` from
the repository and the calling service regenerates.

The random source is injected so tests can use a seeded ``random.Random``.
"""

from __future__ import annotations

import random
import string
from typing import Callable, Optional, TypeVar

import structlog
from django.conf import settings

from modules.core.exceptions import DuplicateIdentifierError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

ALPHANUMERIC = string.ascii_letters + string.digits


class IdentifierGenerator:
    """Produces human-shareable identifiers from an injected random source."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        order_prefix: Optional[str] = None,
        order_length: Optional[int] = None,
        account_prefix: Optional[str] = None,
        account_length: Optional[int] = None,
        item_code_length: Optional[int] = None,
    ) -> None:
        self._rng = rng if rng is not None else random.SystemRandom()
        self.order_prefix = order_prefix or settings.ORDER_NUMBER_PREFIX
        self.order_length = order_length or settings.ORDER_NUMBER_LENGTH
        self.account_prefix = account_prefix or settings.ACCOUNT_NUMBER_PREFIX
        self.account_length = account_length or settings.ACCOUNT_NUMBER_LENGTH
        self.item_code_length = item_code_length or settings.ITEM_CODE_LENGTH

    def _digits(self, length: int) -> str:
        return "".join(self._rng.choice(string.digits) for _ in range(length))

    def next_order_number(self) -> str:
        """``<order prefix><N random digits>``, e.g. ``55504217``."""
        return f"{self.order_prefix}{self._digits(self.order_length)}"

    def next_account_number(self) -> str:
        """``<account prefix><N random digits>`` for customer accounts."""
        return f"{self.account_prefix}{self._digits(self.account_length)}"

    def next_item_code(self) -> str:
        """Fixed-length random ``[A-Za-z0-9]`` string."""
        return "".join(
            self._rng.choice(ALPHANUMERIC) for _ in range(self.item_code_length)
        )


def retry_on_collision(
    create: Callable[[], T], attempts: Optional[int] = None, *, label: str = ""
) -> T:
    """Call *create* until it stops raising ``DuplicateIdentifierError``.

    *create* must generate a fresh identifier on every call and run its
    insert inside a savepoint.  The last collision propagates.
    """
    attempts = attempts or settings.IDENTIFIER_MAX_RETRIES
    for attempt in range(1, attempts + 1):
        try:
            return create()
        except DuplicateIdentifierError:
            logger.warning(
                "identifier.collision", label=label, attempt=attempt, attempts=attempts
            )
            if attempt == attempts:
                raise
    raise DuplicateIdentifierError(f"No {label or 'identifier'} could be generated.")
