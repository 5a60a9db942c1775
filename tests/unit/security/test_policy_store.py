"""
Unit tests for the field access policy store.
"""

import dataclasses

import pytest

from personnel_guard.defaults import DEFAULT_FIELD_POLICIES
from personnel_guard.models import FieldAccessPolicy
from personnel_guard.security.policies import PolicyStore

pytestmark = [pytest.mark.unit, pytest.mark.django_db]


def test_missing_policy_returns_none():
    assert PolicyStore().get_policy("hr", "personal_mobile") is None


def test_policy_lookup_normalizes_role():
    FieldAccessPolicy.objects.create(
        role="hr", field_name="nid_number", can_unmask=True, max_requests_per_day=3
    )

    policy = PolicyStore().get_policy(" HR ", "nid_number")

    assert policy.can_unmask is True
    assert policy.requires_mfa is True
    assert policy.max_requests_per_day == 3
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.can_view = False


def test_upsert_and_list_policies(caplog):
    store = PolicyStore()

    assert store.upsert_policies(DEFAULT_FIELD_POLICIES) == (len(DEFAULT_FIELD_POLICIES), 0)
    assert [p.field_name for p in store.list_policies("manager")] == [
        "basic_salary",
        "nid_number",
        "personal_email",
        "personal_mobile",
    ]

    created, updated = store.upsert_policies(
        [{"role": "auditor", "field_name": "personal_mobile", "can_view": False}]
    )
    assert (created, updated) == (1, 0)
    assert "unknown role" in caplog.text
    assert len(store.list_policies()) == len(DEFAULT_FIELD_POLICIES) + 1
