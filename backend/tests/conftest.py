"""Shared fixtures: recording collaborators and settings isolation."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

BACKEND = Path(__file__).resolve().parent.parent
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))


class RecordingNotifier:
    def __init__(self) -> None:
        self.errors: list = []

    def notify(self, error) -> None:
        self.errors.append(error)


class RecordingBus:
    def __init__(self) -> None:
        self.signals: list[str] = []

    def publish(self, signal: str) -> int:
        self.signals.append(signal)
        return 1


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Fresh Settings per test, never reading a developer's .env file."""
    from app.config import get_settings

    monkeypatch.delenv("STATSIG_SERVER_SECRET", raising=False)
    monkeypatch.delenv("ERROR_NOTIFICATIONS_VIA_CELERY", raising=False)
    monkeypatch.delenv("MAX_DISPLAY_LINE_LENGTH", raising=False)
    monkeypatch.chdir(BACKEND)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def bus() -> RecordingBus:
    return RecordingBus()
