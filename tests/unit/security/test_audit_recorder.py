"""
Unit tests for the audit recorder.
"""

import json

import pytest
from django.db import DatabaseError

from personnel_guard.errors import AuditWriteError, ValidationError
from personnel_guard.models import AuditReadRecord
from personnel_guard.security.audit import AccessType, AuditRecorder

pytestmark = [pytest.mark.unit, pytest.mark.django_db]


def test_record_stores_masked_value_and_actor(officer, hr_actor, clock, caplog):
    recorder = AuditRecorder(clock=clock)

    record_id = recorder.record(
        hr_actor,
        officer,
        "personal_mobile",
        "017*****678",
        AccessType.VIEW,
        correlation_id="corr-1",
        access_reason="Payroll check",
    )

    row = AuditReadRecord.objects.get(pk=record_id)
    assert row.user_id == 2
    assert row.user_role == "hr"
    assert row.user_name == "hr.officer"
    assert row.officer_id == "officer-1"
    assert row.officer_name == "Rahim Uddin"
    assert row.field_value_masked == "017*****678"
    assert row.access_type == "view"
    assert row.access_reason == "Payroll check"
    assert row.ip_address == "10.0.0.2"
    assert row.request_id == "corr-1"
    assert row.created_at == clock.now
    assert row.mfa_verified is False

    payload = [json.loads(r.getMessage()) for r in caplog.records if r.name == "audit"]
    assert payload[0]["event"] == "field_access"
    assert payload[0]["field_name"] == "personal_mobile"
    assert "01712345678" not in caplog.text


def test_record_accepts_mapping_and_string_access_type(user_actor):
    recorder = AuditRecorder()

    record_id = recorder.record(
        user_actor,
        {"id": "officer-9", "full_name": "Nasrin Akter"},
        "personal_email",
        "na***@example.com",
        "view_full",
    )

    row = AuditReadRecord.objects.get(pk=record_id)
    assert row.officer_id == "officer-9"
    assert row.access_type == AccessType.VIEW_FULL.value
    assert row.ip_address is None


def test_unknown_access_type_is_rejected(officer, hr_actor):
    with pytest.raises(ValueError):
        AuditRecorder().record(hr_actor, officer, "personal_mobile", None, "download")
    assert not AuditReadRecord.objects.exists()


def test_disabled_recorder_writes_nothing(settings, officer, hr_actor):
    settings.PERSONNEL_GUARD = {"audit_settings": {"enabled": False}}

    assert AuditRecorder().record(hr_actor, officer, "nid_number", "12****0123", "view") is None
    assert not AuditReadRecord.objects.exists()


def test_transient_failure_is_retried(monkeypatch, officer, hr_actor):
    recorder = AuditRecorder(retries=2)
    real_insert = recorder._insert
    attempts = []

    def flaky_insert(values, using=None):
        attempts.append(values["field_name"])
        if len(attempts) == 1:
            raise DatabaseError("database is locked")
        return real_insert(values, using=using)

    monkeypatch.setattr(recorder, "_insert", flaky_insert)

    assert recorder.record(hr_actor, officer, "nid_number", "12****0123", "view")
    assert len(attempts) == 2
    assert AuditReadRecord.objects.count() == 1


def test_persistent_failure_raises_audit_write_error(monkeypatch, officer, hr_actor, caplog):
    recorder = AuditRecorder(retries=2)
    attempts = []

    def broken_insert(values, using=None):
        attempts.append(values)
        raise DatabaseError("disk I/O error")

    monkeypatch.setattr(recorder, "_insert", broken_insert)

    with pytest.raises(AuditWriteError) as exc_info:
        recorder.record(hr_actor, officer, "nid_number", "12****0123", "view")

    assert len(attempts) == 3
    assert isinstance(exc_info.value.__cause__, DatabaseError)
    assert exc_info.value.context["field_name"] == "nid_number"
    assert "could not be written" in caplog.text


def test_audit_rows_are_append_only(officer, hr_actor):
    record_id = AuditRecorder().record(hr_actor, officer, "personal_mobile", "017*****678", "view")
    row = AuditReadRecord.objects.get(pk=record_id)

    row.field_value_masked = "changed"
    with pytest.raises(ValidationError) as exc_info:
        row.save()
    assert exc_info.value.code == "immutable_record"

    with pytest.raises(ValidationError):
        row.delete()

    assert AuditReadRecord.objects.get(pk=record_id).field_value_masked == "017*****678"
