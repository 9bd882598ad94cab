"""backend/app/services/events/bus.py

Synchronous in-process signal bus.

Signals are bare names with no payload. Handlers run on the publisher's
thread; an exception in one handler is logged and does not stop the
others or reach the publisher.
"""
from __future__ import annotations

import logging
from threading import RLock
from typing import Callable, Dict, List, Protocol

logger = logging.getLogger(__name__)

INITIATE_AUTO_VEO_KEY_CLAIM = "initiateAutoVeoKeyClaim"
INITIATE_AUTO_API_KEY_CLAIM = "initiateAutoApiKeyClaim"

RECOVERY_SIGNALS = frozenset(
    {INITIATE_AUTO_VEO_KEY_CLAIM, INITIATE_AUTO_API_KEY_CLAIM}
)

SignalHandler = Callable[[], None]


class EventBusProtocol(Protocol):
    """Publish side of the bus, as seen by the error classifier."""

    def publish(self, signal: str) -> int:
        ...


class SignalBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[SignalHandler]] = {}
        self._lock = RLock()

    def subscribe(self, signal: str, handler: SignalHandler) -> None:
        with self._lock:
            self._subs.setdefault(signal, []).append(handler)

    def unsubscribe(self, signal: str, handler: SignalHandler) -> None:
        with self._lock:
            handlers = self._subs.get(signal)
            if not handlers or handler not in handlers:
                return
            handlers.remove(handler)
            if not handlers:
                del self._subs[signal]

    def publish(self, signal: str) -> int:
        """Run every handler subscribed to ``signal``.

        Returns the number of handlers invoked, including ones that raised.
        """
        with self._lock:
            handlers = list(self._subs.get(signal, ()))
        for handler in handlers:
            try:
                handler()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Handler for signal %s failed: %s", signal, exc)
        logger.debug("Published signal %s to %d handler(s)", signal, len(handlers))
        return len(handlers)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()


_signal_bus: SignalBus | None = None


def get_signal_bus() -> SignalBus:
    global _signal_bus
    if _signal_bus is None:
        _signal_bus = SignalBus()
    return _signal_bus
