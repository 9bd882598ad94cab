from __future__ import annotations

"""backend/app/services/notifications/error_notifier.py

Notification sink for API errors.

The classifier calls ``notify(error)`` once per handled error and ignores
the outcome. ErrorNotifier turns the raw error into a JSON-safe
ErrorReport and either queues it on Celery or delivers it inline through
the Statsig adapter. Nothing raised here reaches the caller.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Protocol

from pydantic import BaseModel, Field

from app.config import get_settings
from app.services.diagnostics.error_classifier import normalize_error_message
from app.services.notifications.statsig_client import send_error_report

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """One-way "send error details" operation."""

    def notify(self, error: Any) -> None:
        ...


class ErrorReport(BaseModel):
    error_type: str
    message: str
    detail: str
    app_name: str
    environment: str
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _safe_repr(error: Any, limit: int) -> str:
    try:
        text = repr(error)
    except Exception:  # noqa: BLE001
        text = f"<unrepresentable {type(error).__name__}>"
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def build_error_report(error: Any) -> ErrorReport:
    settings = get_settings()
    return ErrorReport(
        error_type=type(error).__name__,
        message=normalize_error_message(error),
        detail=_safe_repr(error, settings.error_report_detail_max_chars),
        app_name=settings.app_name,
        environment=settings.environment,
    )


class ErrorNotifier:
    """Default NotificationSink: Celery when enabled, inline otherwise."""

    def __init__(self, *, use_celery: bool | None = None) -> None:
        if use_celery is None:
            use_celery = get_settings().error_notifications_via_celery
        self.use_celery = use_celery

    def notify(self, error: Any) -> None:
        try:
            report = build_error_report(error).model_dump(mode="json")
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not build error report: %s", exc)
            return

        if self.use_celery and self._dispatch(report):
            return
        self._deliver_inline(report)

    def _dispatch(self, report: dict[str, Any]) -> bool:
        try:
            # Imported lazily so the Celery app is only built when used.
            from app.services.tasks import deliver_error_report_task

            async_result = deliver_error_report_task.delay(report)
            logger.debug("Queued error report as task %s", async_result.id)
            return True
        except Exception as exc:  # noqa: BLE001
            logger.warning("Error report dispatch failed, delivering inline: %s", exc)
            return False

    def _deliver_inline(self, report: dict[str, Any]) -> None:
        try:
            send_error_report(report)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Inline error report delivery failed: %s", exc)


_error_notifier: ErrorNotifier | None = None


def get_error_notifier() -> ErrorNotifier:
    global _error_notifier
    if _error_notifier is None:
        _error_notifier = ErrorNotifier()
    return _error_notifier
