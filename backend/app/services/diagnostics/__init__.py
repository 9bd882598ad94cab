from __future__ import annotations

"""
Diagnostics and error classification utilities.

This package currently provides:
- error_classifier: classify errors raised by generative-AI API calls
  into short codes and user-facing messages, notifying admins and
  starting key-recovery flows as a side effect.

The goal is to keep error handling logic centralized and deterministic.
"""

from .error_classifier import (  # noqa: F401
    ApiErrorHandler,
    ErrorClassification,
    classify_api_error,
    detect_error_code,
    handle_api_error,
    normalize_error_message,
)
