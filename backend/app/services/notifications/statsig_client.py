"""Statsig transport for admin error notifications.

Each API error becomes one ``api_error`` event whose value is the error
type and whose metadata is the serialized ErrorReport. Without a server
secret the adapter is disabled and events are dropped.
"""
from __future__ import annotations

import logging
from typing import Any

from statsig import StatsigEvent, StatsigOptions, StatsigUser
from statsig.statsig_server import StatsigServer

from app.config import get_settings

logger = logging.getLogger(__name__)

API_ERROR_EVENT = "api_error"


class _StatsigAdapter:
    def __init__(self, secret_key: str | None, environment: str):
        self._client: StatsigServer | None = None
        if not secret_key:
            return

        try:
            client = StatsigServer()
            client.initialize(secret_key, StatsigOptions(tier=environment))
            self._client = client
        except Exception as exc:  # noqa: BLE001
            logger.warning("Statsig initialization failed: %s", exc)
            self._client = None

    @property
    def enabled(self) -> bool:
        return self._client is not None

    def send(
        self,
        event_name: str,
        *,
        user_id: str,
        value: str | None,
        metadata: dict[str, str],
    ) -> bool:
        """Queue one event; returns False when it was dropped."""
        if not self._client:
            logger.debug("Statsig disabled; dropping %s event", event_name)
            return False

        try:
            self._client.log_event(
                StatsigEvent(
                    StatsigUser(user_id=user_id),
                    event_name,
                    value=value,
                    metadata=metadata,
                )
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Statsig %s event failed: %s", event_name, exc)
            return False
        return True

    def shutdown(self) -> None:
        if not self._client:
            return

        try:
            self._client.shutdown()
        except Exception as exc:  # noqa: BLE001
            logger.debug("Statsig shutdown failed: %s", exc)


_statsig_client: _StatsigAdapter | None = None


def get_statsig_client() -> _StatsigAdapter:
    global _statsig_client
    if _statsig_client is None:
        settings = get_settings()
        _statsig_client = _StatsigAdapter(
            settings.statsig_server_secret, settings.environment
        )
    return _statsig_client


def send_error_report(report: dict[str, Any]) -> bool:
    """Forward a serialized ErrorReport to Statsig.

    Statsig metadata must be flat strings, so every value is stringified
    and ``None`` values are left out.
    """
    metadata = {key: str(value) for key, value in report.items() if value is not None}
    client = get_statsig_client()
    return client.send(
        API_ERROR_EVENT,
        user_id=metadata.get("app_name", "backend"),
        value=metadata.get("error_type"),
        metadata=metadata,
    )


def shutdown_statsig() -> None:
    global _statsig_client
    if _statsig_client is None:
        return
    _statsig_client.shutdown()
    _statsig_client = None
