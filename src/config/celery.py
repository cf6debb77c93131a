"""Celery application for the order & inventory project.

``DJANGO_SETTINGS_MODULE`` is set before the app is created so Celery
reads its configuration from Django settings (``CELERY_`` prefix).
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("orders_engine")

app.config_from_object("django.conf:settings", namespace="CELERY")

# picks up modules/core/tasks.py (outbox relay)
app.autodiscover_tasks()
