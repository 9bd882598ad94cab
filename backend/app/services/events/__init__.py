from __future__ import annotations

"""
In-process event bus used to start credential-recovery flows.

The error classifier only publishes; UI/session code subscribes.
"""

from .bus import (  # noqa: F401
    INITIATE_AUTO_API_KEY_CLAIM,
    INITIATE_AUTO_VEO_KEY_CLAIM,
    RECOVERY_SIGNALS,
    EventBusProtocol,
    SignalBus,
    get_signal_bus,
)
