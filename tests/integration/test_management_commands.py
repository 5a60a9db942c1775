"""
Integration tests for the management commands.
"""

from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from io import StringIO

import pytest
from django.core.management import call_command

from personnel_guard.defaults import DEFAULT_FIELD_POLICIES
from personnel_guard.models import FieldAccessPolicy, UnmaskRequest

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


def test_seed_field_policies_is_idempotent():
    out = StringIO()
    call_command("seed_field_policies", stdout=out)

    assert FieldAccessPolicy.objects.count() == len(DEFAULT_FIELD_POLICIES)
    assert f"{len(DEFAULT_FIELD_POLICIES)} created, 0 updated" in out.getvalue()

    FieldAccessPolicy.objects.filter(role="hr", field_name="nid_number").update(max_requests_per_day=99)
    out = StringIO()
    call_command("seed_field_policies", stdout=out)

    assert f"0 created, {len(DEFAULT_FIELD_POLICIES)} updated" in out.getvalue()
    assert FieldAccessPolicy.objects.get(role="hr", field_name="nid_number").max_requests_per_day == 5


def test_seed_field_policies_for_selected_roles():
    call_command("seed_field_policies", "--role", "manager", "--role", "USER", stdout=StringIO())

    assert set(FieldAccessPolicy.objects.values_list("role", flat=True)) == {"manager", "user"}


def test_expire_unmask_requests(officer):
    long_ago = datetime(2020, 1, 1, 9, 0, tzinfo=dt_timezone.utc)
    UnmaskRequest.objects.create(
        user_id=2,
        user_role="hr",
        officer=officer,
        field_name="personal_mobile",
        mfa_code="123456",
        mfa_code_expires_at=long_ago + timedelta(minutes=5),
        created_at=long_ago,
    )
    UnmaskRequest.objects.create(
        user_id=2,
        user_role="hr",
        officer=officer,
        field_name="personal_email",
        status="rejected",
        created_at=long_ago,
    )

    out = StringIO()
    call_command("expire_unmask_requests", stdout=out)

    assert "Expired 1 unmask request(s)" in out.getvalue()
    assert set(UnmaskRequest.objects.values_list("status", flat=True)) == {"expired", "rejected"}
