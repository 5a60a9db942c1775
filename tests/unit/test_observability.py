"""
Unit tests for Sentry error capture.
"""

import pytest
import sentry_sdk

from personnel_guard.observability import capture_enabled, capture_exception

pytestmark = pytest.mark.unit


def test_capture_is_disabled_by_default(settings, monkeypatch):
    settings.PERSONNEL_GUARD = {}
    captured = []
    monkeypatch.setattr(sentry_sdk, "capture_exception", captured.append)

    capture_exception(RuntimeError("boom"), operation="officer.transfer")

    assert capture_enabled() is False
    assert captured == []


def test_capture_sends_error_when_enabled(settings, monkeypatch):
    settings.PERSONNEL_GUARD = {"observability_settings": {"capture_exceptions": True}}
    captured = []
    monkeypatch.setattr(sentry_sdk, "capture_exception", captured.append)
    error = RuntimeError("boom")

    capture_exception(error, operation="officer.transfer", correlation_id=None)

    assert captured == [error]


def test_capture_failure_is_logged(settings, monkeypatch, caplog):
    settings.PERSONNEL_GUARD = {"observability_settings": {"capture_exceptions": True}}

    def broken(error):
        raise ConnectionError("sentry unreachable")

    monkeypatch.setattr(sentry_sdk, "capture_exception", broken)

    capture_exception(RuntimeError("boom"))

    assert "Sentry capture failed" in caplog.text
