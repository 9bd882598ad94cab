from __future__ import annotations

from app.services.notifications import ErrorNotifier, build_error_report
from app.services.notifications import error_notifier, statsig_client


def test_build_error_report_snapshot():
    report = build_error_report(ValueError("Failed to fetch"))
    assert report.error_type == "ValueError"
    assert report.message == "Failed to fetch"
    assert report.detail == "ValueError('Failed to fetch')"
    assert report.app_name == "genai-error-handler"
    assert report.environment == "development"


def test_build_error_report_truncates_detail(monkeypatch):
    from app.config import get_settings

    monkeypatch.setenv("ERROR_REPORT_DETAIL_MAX_CHARS", "10")
    get_settings.cache_clear()
    report = build_error_report("z" * 50)
    assert report.detail == "'zzzzzzzzz..."
    assert report.message == "z" * 50


def test_notify_delivers_inline_by_default(monkeypatch):
    sent = []
    monkeypatch.setattr(error_notifier, "send_error_report", sent.append)

    ErrorNotifier().notify(RuntimeError("boom"))

    assert len(sent) == 1
    assert sent[0]["error_type"] == "RuntimeError"
    assert isinstance(sent[0]["occurred_at"], str)


def test_notify_queues_celery_task(monkeypatch):
    from app.services import tasks

    queued = []
    inline = []

    class FakeResult:
        id = "task-1"

    def fake_delay(report):
        queued.append(report)
        return FakeResult()

    monkeypatch.setattr(tasks.deliver_error_report_task, "delay", fake_delay)
    monkeypatch.setattr(error_notifier, "send_error_report", inline.append)

    ErrorNotifier(use_celery=True).notify(RuntimeError("boom"))

    assert [r["message"] for r in queued] == ["boom"]
    assert inline == []


def test_notify_falls_back_inline_when_dispatch_fails(monkeypatch):
    from app.services import tasks

    def broken_delay(report):
        raise ConnectionError("broker unreachable")

    inline = []
    monkeypatch.setattr(tasks.deliver_error_report_task, "delay", broken_delay)
    monkeypatch.setattr(error_notifier, "send_error_report", inline.append)

    ErrorNotifier(use_celery=True).notify("text error")

    assert [r["message"] for r in inline] == ["text error"]


def test_notify_never_raises(monkeypatch):
    def broken_send(report):
        raise RuntimeError("transport down")

    monkeypatch.setattr(error_notifier, "send_error_report", broken_send)
    ErrorNotifier(use_celery=False).notify(RuntimeError("boom"))


def test_send_error_report_is_dropped_without_secret():
    statsig_client.shutdown_statsig()
    assert statsig_client.get_statsig_client().enabled is False
    assert statsig_client.send_error_report({"error_type": "RuntimeError", "message": "x"}) is False
    statsig_client.shutdown_statsig()


def test_send_error_report_flattens_metadata(monkeypatch):
    captured = {}

    class FakeAdapter:
        def send(self, event_name, *, user_id, value, metadata):
            captured.update(event=event_name, user=user_id, value=value, metadata=metadata)
            return True

    monkeypatch.setattr(statsig_client, "get_statsig_client", lambda: FakeAdapter())
    assert statsig_client.send_error_report(
        {"error_type": "RuntimeError", "app_name": "svc", "code": 403, "detail": None}
    )
    assert captured == {
        "event": "api_error",
        "user": "svc",
        "value": "RuntimeError",
        "metadata": {"error_type": "RuntimeError", "app_name": "svc", "code": "403"},
    }


def test_report_timestamp_is_timezone_aware():
    report = build_error_report(RuntimeError("boom"))
    assert report.occurred_at.tzinfo is not None
    assert report.occurred_at.utcoffset().total_seconds() == 0
