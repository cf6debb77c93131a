"""Order domain constants.

Status values and the one-way state machine::

    ongoing --confirm--> completed
    ongoing --cancel---> canceled
"""

from django.db import models


class Status(models.TextChoices):
    ONGOING = "ongoing", "Ongoing"
    COMPLETED = "completed", "Completed"
    CANCELED = "canceled", "Canceled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    Status.ONGOING: {Status.COMPLETED, Status.CANCELED},
    Status.COMPLETED: set(),
    Status.CANCELED: set(),
}

TERMINAL_STATES: set[str] = {Status.COMPLETED, Status.CANCELED}
