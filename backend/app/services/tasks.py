# backend/app/services/tasks.py
from __future__ import annotations

"""
Celery tasks for the error-handling backend.

Currently provides:
- deliver_error_report_task: forward a serialized ErrorReport to the
  admin notification transport in the background.
"""

from typing import Any

from celery import Task

from app.services.celery_app import celery_app
from app.services.notifications.statsig_client import send_error_report


@celery_app.task(bind=True, name="app.services.tasks.deliver_error_report_task")
def deliver_error_report_task(self: Task, report: dict[str, Any]) -> bool:
    """Celery task: deliver one error report; returns whether it was sent."""
    return send_error_report(report)
