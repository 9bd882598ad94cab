# backend/app/services/celery_app.py
from __future__ import annotations

"""
Celery application configuration for background error reporting.

This module defines a single Celery instance:

    celery_app = Celery(...)

It is used by:
- app.services.tasks (for task definitions)
- the worker entrypoint via
  `celery -A app.services.celery_app.celery_app worker -Q notifications`
"""

from celery import Celery

from app.config import get_settings

settings = get_settings()

celery_app = Celery(
    "error_notifications",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.services.tasks"],
)

# Error reports are fire-and-forget; nobody reads the result
celery_app.conf.task_ignore_result = True

# Route notification tasks to a dedicated queue
celery_app.conf.task_routes = {
    "app.services.tasks.*": {"queue": "notifications"},
}
