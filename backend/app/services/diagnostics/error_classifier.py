from __future__ import annotations

"""backend/app/services/diagnostics/error_classifier.py

Centralized classification of errors raised by generative-AI API calls.

The classifier takes whatever the caller caught, derives a short error
code from the message text and returns a sentence that is safe to show
in the UI. Two side effects happen along the way:
- the raw error is always forwarded to the notification sink
- a 401/403 (or a 400 caused by a bad key) publishes a recovery signal
  on the event bus so the key-claim flow can start

Detection order matters; the first rule that yields a code wins:
1. priority keywords ("resource exhausted", safety-filter bad requests)
2. ``error.code`` from an embedded JSON object
3. a bracketed or standalone three-digit number
4. generic keywords ("permission denied", "failed to fetch", ...)

Typical codes:
- 400, 401, 403, 429, 500, 503 (or any other three-digit string)
- NET (connectivity failure)
- None (unclassified; the first line of the message is shown)
"""

import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from app.config import get_settings
from app.services.events.bus import (
    INITIATE_AUTO_API_KEY_CLAIM,
    INITIATE_AUTO_VEO_KEY_CLAIM,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR_CODE = "NET"

VEO_AUTH_FAILED_MESSAGE = "VEO authorization failed. Please try again or check your API key."
INVALID_API_KEY_MESSAGE = "API Key is invalid or expired. Please try again or check your API key."
SAFETY_FILTER_MESSAGE = "Request blocked by safety filters. Please try a different prompt or image."
CAPACITY_MESSAGE = "Server Penuh. Sila tunggu sebentar sebelum mencuba lagi."
UNAVAILABLE_MESSAGE = "Google API is temporarily unavailable. Please try again in a few moments."
NETWORK_MESSAGE = "Network error. Please check your internet connection."
UNEXPECTED_MESSAGE = (
    "An unexpected error occurred. Please try again. "
    "If the problem persists, check the AI API Log for details."
)

CANNED_MESSAGES = {
    "400": SAFETY_FILTER_MESSAGE,
    "429": CAPACITY_MESSAGE,
    "500": UNAVAILABLE_MESSAGE,
    "503": UNAVAILABLE_MESSAGE,
    NETWORK_ERROR_CODE: NETWORK_MESSAGE,
}

AUTH_ERROR_CODES = ("401", "403")

# Raw SDK errors carry this tag; they are too technical to show as-is.
SDK_ERROR_TAG = "[GoogleGenerativeAI Error]"

_JSON_OBJECT_RE = re.compile(r"(\{.*\})", re.DOTALL)
_STATUS_CODE_RE = re.compile(r"\[(\d{3})\]|\b(\d{3})\b", re.ASCII)


@dataclass
class ErrorClassification:
    """Outcome of classifying one error."""

    code: Optional[str]
    message: str
    signal: Optional[str] = None


def _contains_any(haystack: str, needles: tuple[str, ...]) -> bool:
    return any(n in haystack for n in needles)


def normalize_error_message(error: Any) -> str:
    """Return the message text of ``error``.

    Exceptions that expose a string ``message`` attribute (as the Google
    SDKs do) use it; other exceptions and plain values use ``str()``.
    """
    if isinstance(error, BaseException):
        message = getattr(error, "message", None)
        if isinstance(message, str):
            return message
    try:
        return str(error)
    except Exception:  # noqa: BLE001
        pass
    try:
        return repr(error)
    except Exception:  # noqa: BLE001
        return f"<unprintable {type(error).__name__}>"


def _reject_constant(name: str) -> float:
    """NaN and Infinity are not JSON; fail the parse like a strict decoder."""
    raise ValueError(f"non-standard JSON constant {name}")


def _code_from_json(message: str) -> Optional[str]:
    match = _JSON_OBJECT_RE.search(message)
    if not match:
        return None
    try:
        payload = json.loads(match.group(1), parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None
    code = error.get("code")
    if not code:
        return None
    if isinstance(code, float):
        # 1e999 still decodes to inf even with constants rejected.
        if not math.isfinite(code):
            return None
        if code.is_integer():
            code = int(code)
    return str(code)


def _code_from_number(message: str) -> Optional[str]:
    match = _STATUS_CODE_RE.search(message)
    if not match:
        return None
    return match.group(1) or match.group(2)


def _code_from_keywords(lowered: str) -> Optional[str]:
    if _contains_any(lowered, ("permission denied", "api key not valid")):
        return "403"
    if "bad request" in lowered:
        return "400"
    if _contains_any(lowered, ("server error", "503")):
        return "500"
    if "failed to fetch" in lowered:
        return NETWORK_ERROR_CODE
    return None


def detect_error_code(message: str) -> Optional[str]:
    """Derive an error code from message text, or None."""
    lowered = message.lower()

    # Specific phrases beat any generic number elsewhere in the text.
    if _contains_any(lowered, ("resource exhausted", "quota exceeded")):
        return "429"
    if "bad request" in lowered and _contains_any(lowered, ("safety", "filter")):
        return "400"

    return (
        _code_from_json(message)
        or _code_from_number(message)
        or _code_from_keywords(lowered)
    )


def _recovery_signal(code: Optional[str], lowered: str) -> tuple[Optional[str], Optional[str]]:
    """Return (signal, message) when the code calls for a key-claim flow."""
    if code in AUTH_ERROR_CODES and "veo auth token" in lowered:
        return INITIATE_AUTO_VEO_KEY_CLAIM, VEO_AUTH_FAILED_MESSAGE
    if code in AUTH_ERROR_CODES or (code == "400" and "api key not valid" in lowered):
        return INITIATE_AUTO_API_KEY_CLAIM, INVALID_API_KEY_MESSAGE
    return None, None


def _display_message(code: Optional[str], message: str) -> str:
    canned = CANNED_MESSAGES.get(code) if code else None
    if canned:
        return canned

    first_line = message.split("\n")[0]
    if len(first_line) > get_settings().max_display_line_length or SDK_ERROR_TAG in first_line:
        return UNEXPECTED_MESSAGE
    return first_line


def classify_api_error(error: Any, *, notifier: Any, event_bus: Any) -> ErrorClassification:
    """Classify ``error``, notify admins and publish any recovery signal.

    ``notifier`` needs ``notify(error)``; ``event_bus`` needs
    ``publish(signal)``. Failures in either are logged and swallowed, so
    this function does not raise.
    """
    logger.error("Original API Error: %r", error)

    try:
        notifier.notify(error)
    except Exception as exc:  # noqa: BLE001
        logger.warning("Error notification failed: %s", exc)

    message = normalize_error_message(error)
    code = detect_error_code(message)
    logger.debug("Classified API error as %s", code)

    signal, recovery_message = _recovery_signal(code, message.lower())
    if signal is not None:
        try:
            event_bus.publish(signal)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Publishing %s failed: %s", signal, exc)
        return ErrorClassification(code=code, message=recovery_message, signal=signal)

    return ErrorClassification(code=code, message=_display_message(code, message))


class ApiErrorHandler:
    """Error classifier bound to a notifier and an event bus."""

    def __init__(self, notifier: Any, event_bus: Any) -> None:
        self.notifier = notifier
        self.event_bus = event_bus

    def classify(self, error: Any) -> ErrorClassification:
        return classify_api_error(error, notifier=self.notifier, event_bus=self.event_bus)

    def handle(self, error: Any) -> str:
        return self.classify(error).message


def handle_api_error(error: Any, *, notifier: Any = None, event_bus: Any = None) -> str:
    """Return a user-facing message for an error caught from an API call.

    Omitted collaborators fall back to the process-wide notifier and bus.
    """
    # Imported here to avoid circular imports at module load time.
    if notifier is None:
        from app.services.notifications import get_error_notifier

        notifier = get_error_notifier()
    if event_bus is None:
        from app.services.events import get_signal_bus

        event_bus = get_signal_bus()
    return classify_api_error(error, notifier=notifier, event_bus=event_bus).message
