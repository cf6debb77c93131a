"""Storage-boundary helpers.

``storage_transaction`` opens the unit of work of a use-case.  A database
that does not answer in time (lock wait timeout, lost connection) is
reported as ``StorageUnavailableError`` (retryable) instead of leaking
``django.db.OperationalError`` to the caller, including failures raised
while committing.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import structlog
from django.conf import settings
from django.db import OperationalError, connection, transaction

from modules.core.exceptions import StorageUnavailableError

logger = structlog.get_logger(__name__)


def apply_lock_timeout(timeout: Optional[float] = None) -> Optional[int]:
    """Bound row-lock waits for the current transaction.

    PostgreSQL takes a ``SET LOCAL`` that ends with the transaction.  On
    MySQL the setting is per session, so the previous value is returned
    for ``restore_lock_timeout``.  SQLite serialises writers and honours
    the connection ``timeout`` option from ``DATABASES`` instead.
    """
    seconds = settings.STORAGE_LOCK_TIMEOUT if timeout is None else timeout
    vendor = connection.vendor
    if vendor == "postgresql":
        with connection.cursor() as cursor:
            cursor.execute(
                "SET LOCAL lock_timeout = %s", [f"{int(seconds * 1000)}ms"]
            )
    elif vendor == "mysql":
        with connection.cursor() as cursor:
            cursor.execute("SELECT @@SESSION.innodb_lock_wait_timeout")
            previous = cursor.fetchone()[0]
            cursor.execute(
                "SET SESSION innodb_lock_wait_timeout = %s", [max(1, int(seconds))]
            )
        return previous
    return None


def restore_lock_timeout(previous: Optional[int]) -> None:
    """Put back the MySQL session lock timeout saved by ``apply_lock_timeout``."""
    if previous is None:
        return
    with connection.cursor() as cursor:
        cursor.execute("SET SESSION innodb_lock_wait_timeout = %s", [previous])


@contextmanager
def storage_transaction(
    operation: str, timeout: Optional[float] = None
) -> Iterator[None]:
    """``transaction.atomic()`` with a lock timeout and error translation.

    Everything inside commits together or not at all.
    """
    try:
        with transaction.atomic():
            previous = apply_lock_timeout(timeout)
            try:
                yield
            finally:
                restore_lock_timeout(previous)
    except OperationalError as exc:
        logger.warning("storage.unavailable", operation=operation, error=str(exc))
        raise StorageUnavailableError(
            f"Storage did not answer while running {operation}."
        ) from exc
