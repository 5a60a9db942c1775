"""
Unit tests for the record filter.
"""

import copy

import pytest
from django.core.management import call_command

from personnel_guard.errors import AuditWriteError
from personnel_guard.models import AuditReadRecord, FieldAccessPolicy
from personnel_guard.security.field_permissions import (
    FilterOptions,
    RecordFilter,
    filter_record,
    filter_records,
)

pytestmark = [pytest.mark.unit, pytest.mark.django_db]

PERSONAL_FIELDS = ["father_name", "date_of_birth", "present_address"]
FINANCIAL_FIELDS = ["current_grade", "basic_salary", "bank_account_number"]
METADATA_FIELDS = ["notes", "phone_visibility", "profile_published", "verification_status"]


class _FailingRecorder:
    def __init__(self):
        self.calls = 0

    def record(self, *args, **kwargs):
        self.calls += 1
        raise AuditWriteError("disk full")


def test_user_sees_masked_phone_only(officer, user_actor):
    result = filter_record(officer, user_actor)

    assert result["personal_mobile"] == "017*****678"
    assert result["_personal_mobile_masked"] is True
    assert result["official_mobile"] == "+88018*****678"
    assert result["personal_email"] == "ra***@example.com"
    for field in ["nid_number", "passport_number", "tin_number"]:
        assert field not in result
    for field in PERSONAL_FIELDS + FINANCIAL_FIELDS + METADATA_FIELDS:
        assert field not in result
    assert result["full_name"] == "Rahim Uddin"
    assert result["office_name"] == "Head Office"


def test_hr_sees_masked_identifiers_and_financial_data(officer, hr_actor):
    result = filter_record(officer, hr_actor)

    assert result["personal_mobile"] == "017*****678"
    assert result["nid_number"] == "12****0123"
    assert result["_nid_number_masked"] is True
    assert result["passport_number"] == "****3456"
    assert result["father_name"] == "Karim Uddin"
    assert result["bank_account_number"] == "001***1"
    assert result["_bank_account_number_masked"] is True
    assert str(result["basic_salary"]) == "35000.00"
    for field in METADATA_FIELDS:
        assert field not in result


def test_admin_sees_internal_metadata(officer, admin_actor):
    result = filter_record(officer, admin_actor)

    assert result["notes"] == "Transferred on request"
    assert result["phone_visibility"] == "internal"
    assert result["profile_published"] is True


def test_restricted_groups_hidden_for_roles_outside_restricted_tier(officer):
    from personnel_guard.security.context import Actor

    for role in ["user", "clerk", "Adminn"]:
        result = filter_record(officer, Actor(user_id=50, role=role))
        for field in ["nid_number", "passport_number", "tin_number"] + PERSONAL_FIELDS:
            assert field not in result


def test_private_record_setting_hides_group_from_hr(officer, hr_actor, admin_actor):
    officer.phone_visibility = "private"
    officer.save()

    assert "personal_mobile" not in filter_record(officer, hr_actor)
    assert filter_record(officer, admin_actor)["personal_mobile"] == "017*****678"


def test_manager_policy_hides_financial_group(officer, manager_actor):
    FieldAccessPolicy.objects.create(role="manager", field_name="basic_salary", can_view=False)

    result = filter_record(officer, manager_actor)

    for field in FINANCIAL_FIELDS:
        assert field not in result
    assert result["father_name"] == "Karim Uddin"


def test_anonymous_access(officer):
    officer.profile_published = False
    officer.save()
    assert filter_record(officer, None) is None

    officer.profile_published = True
    officer.phone_visibility = "public"
    officer.save()
    result = filter_record(officer, None)

    assert result["personal_mobile"] == "017*****678"
    assert "personal_email" not in result
    assert "_unmask_info" not in result


def test_filter_does_not_mutate_input(officer, hr_actor):
    record = officer.to_record()
    snapshot = copy.deepcopy(record)

    first = filter_record(record, hr_actor)
    second = filter_record(record, hr_actor)

    assert record == snapshot
    assert first == second


def test_unmask_info_reflects_policies(officer, hr_actor, admin_actor):
    result = filter_record(officer, hr_actor)
    assert result["_unmask_info"]["phone"]["allowed"] is False
    assert result["_unmask_info"]["phone"]["reason"] == "No access policy defined for this role"

    call_command("seed_field_policies", verbosity=0)

    result = filter_record(officer, hr_actor)
    phone = result["_unmask_info"]["phone"]
    assert phone["allowed"] is True
    assert phone["requires_second_factor"] is True
    assert phone["remaining_today"] == 10
    assert set(result["_unmask_info"]) == {"phone", "email", "nid"}
    assert "01712345678" not in str(result["_unmask_info"])

    admin_info = filter_record(officer, admin_actor)["_unmask_info"]
    assert admin_info["nid"]["allowed"] is True


def test_log_access_records_masked_views(officer, hr_actor):
    filter_record(officer, hr_actor, FilterOptions(log_access=True, correlation_id="req-1"))

    rows = AuditReadRecord.objects.filter(officer_id="officer-1")
    assert rows.count() == 7
    assert set(rows.values_list("access_type", flat=True)) == {"view"}
    mobile = rows.get(field_name="personal_mobile")
    assert mobile.field_value_masked == "017*****678"
    assert mobile.request_id == "req-1"
    assert mobile.user_role == "hr"
    assert mobile.ip_address == "10.0.0.2"
    assert not rows.filter(field_name="bank_account_number").exists()


def test_unmasked_display_is_audited_as_view_full(officer, admin_actor):
    result = filter_record(
        officer, admin_actor, FilterOptions(apply_masking=False, log_access=True)
    )

    assert result["personal_mobile"] == "01712345678"
    assert "_personal_mobile_masked" not in result
    assert "_unmask_info" not in result
    mobile = AuditReadRecord.objects.get(field_name="personal_mobile")
    assert mobile.access_type == "view_full"
    assert mobile.field_value_masked == "017*****678"


def test_hidden_fields_are_not_audited(officer, user_actor):
    filter_record(officer, user_actor, FilterOptions(log_access=True))

    fields = set(AuditReadRecord.objects.values_list("field_name", flat=True))
    assert fields == {"personal_mobile", "official_mobile", "personal_email", "official_email"}
    assert AuditReadRecord.objects.first().ip_address is None


def test_audit_failure_does_not_fail_the_read(officer, hr_actor, caplog):
    recorder = _FailingRecorder()
    record_filter = RecordFilter(recorder=recorder)

    result = record_filter.filter_record(officer, hr_actor, FilterOptions(log_access=True))

    assert result["personal_mobile"] == "017*****678"
    assert recorder.calls == 7
    assert "Failed to record access" in caplog.text


def test_filter_records_drops_hidden_profiles(officer, offices):
    from personnel_guard.models import Officer

    Officer.objects.create(id="officer-2", full_name="Hidden", office=offices["office-2"])

    assert [r["id"] for r in filter_records(Officer.objects.order_by("id"), None)] == ["officer-1"]
    assert filter_records(None, None) == []


def _strings(value):
    if isinstance(value, dict):
        for key, item in value.items():
            yield str(key)
            yield from _strings(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _strings(item)
    elif value is not None:
        yield str(value)


def test_financial_group_needs_admin_or_hr_without_policy_rows(officer, manager_actor, hr_actor):
    assert not FieldAccessPolicy.objects.exists()

    result = filter_record(officer, manager_actor)

    for field in FINANCIAL_FIELDS + ["bank_name", "current_scale"]:
        assert field not in result
    assert result["father_name"] == "Karim Uddin"
    assert filter_record(officer, hr_actor)["bank_account_number"] == "001***1"


def test_financial_viewer_roles_are_configurable(settings, officer, manager_actor, hr_actor):
    settings.PERSONNEL_GUARD = {
        "visibility_settings": {"group_viewer_roles": {"financial": ["admin", "manager"]}}
    }

    assert filter_record(officer, manager_actor)["basic_salary"] == officer.basic_salary
    assert "basic_salary" not in filter_record(officer, hr_actor)


def test_restricted_phone_is_removed_for_plain_users(officer, user_actor, hr_actor):
    officer.phone_visibility = "restricted"
    officer.save()

    result = filter_record(officer, user_actor)

    assert "personal_mobile" not in result
    assert "official_mobile" not in result
    assert "_personal_mobile_masked" not in result
    assert "phone" not in result.get("_unmask_info", {})
    assert filter_record(officer, hr_actor)["personal_mobile"] == "017*****678"


def test_masked_response_never_contains_raw_values(officer, hr_actor):
    call_command("seed_field_policies", verbosity=0)

    result = filter_record(officer, hr_actor, FilterOptions(log_access=True))
    rendered = list(_strings(result))

    assert "_unmask_info" in result
    for raw in [
        "01712345678",
        "+8801812345678",
        "rahim@example.com",
        "rahim.uddin@agency.gov.bd",
        "1234567890123",
        "BX0123456",
        "0012345678901",
    ]:
        assert not any(raw in text for text in rendered), raw
    stored = AuditReadRecord.objects.values_list("field_value_masked", flat=True)
    assert "01712345678" not in list(stored)
