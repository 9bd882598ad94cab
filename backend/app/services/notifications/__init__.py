from __future__ import annotations

"""
Admin notifications for failed generative-AI API calls.

This package provides:
- error_notifier: the notification sink handed to the error classifier.
  It snapshots the raw error into an ErrorReport and dispatches it
  fire-and-forget.
- statsig_client: the transport that actually records the report.
"""

from .error_notifier import (  # noqa: F401
    ErrorNotifier,
    ErrorReport,
    NotificationSink,
    build_error_report,
    get_error_notifier,
)
