"""
Unit tests for the visibility resolver.
"""

import pytest
from django.db import DatabaseError

from personnel_guard.models import FieldAccessPolicy
from personnel_guard.security.field_permissions import (
    FieldVisibility,
    VisibilityResolver,
    get_group,
)
from personnel_guard.security.policies import PolicyStore

pytestmark = pytest.mark.unit


class _BrokenPolicyStore:
    using = "default"

    def get_policy(self, role, field_name):
        raise DatabaseError("no such table: personnel_guard_fieldaccesspolicy")


@pytest.fixture
def resolver(db):
    return VisibilityResolver(PolicyStore())


def test_anonymous_sees_public_levels_only(resolver):
    assert resolver.has_view_permission(None, "personal_mobile", "public")
    assert not resolver.has_view_permission(None, "personal_mobile", "internal")


@pytest.mark.parametrize(
    "level,expected",
    [
        ("public", {"admin", "hr", "manager", "user"}),
        ("internal", {"admin", "hr", "manager", "user"}),
        ("restricted", {"admin", "hr", "manager"}),
        ("private", {"admin"}),
        ("bogus", {"admin"}),
    ],
)
def test_tier_matrix(resolver, admin_actor, hr_actor, manager_actor, user_actor, level, expected):
    actors = {
        "admin": admin_actor,
        "hr": hr_actor,
        "manager": manager_actor,
        "user": user_actor,
    }
    allowed = {
        name for name, actor in actors.items()
        if resolver.has_view_permission(actor, "nid_number", level)
    }
    assert allowed == expected


def test_policy_can_only_narrow_the_tier_decision(resolver, manager_actor, user_actor):
    FieldAccessPolicy.objects.create(role="manager", field_name="basic_salary", can_view=False)
    FieldAccessPolicy.objects.create(role="user", field_name="nid_number", can_view=True)

    assert not resolver.has_view_permission(manager_actor, "basic_salary", "restricted")
    # A permissive policy never lifts a tier denial
    assert not resolver.has_view_permission(user_actor, "nid_number", "restricted")
    assert resolver.has_view_permission(manager_actor, "nid_number", "restricted")


def test_policy_store_failure_falls_back_to_tier(db, admin_actor, user_actor, caplog):
    resolver = VisibilityResolver(_BrokenPolicyStore())

    assert resolver.has_view_permission(admin_actor, "nid_number", "private")
    assert not resolver.has_view_permission(user_actor, "nid_number", "restricted")
    assert "Policy store unavailable" in caplog.text


def test_group_level_uses_record_setting_then_defaults(resolver, settings):
    phone = get_group("phone")
    financial = get_group("financial")

    assert resolver.group_level(phone, {"phone_visibility": "private"}).value == "private"
    assert resolver.group_level(phone, {}).value == "internal"
    assert resolver.group_level(financial, {}).value == "restricted"

    settings.PERSONNEL_GUARD = {
        "visibility_settings": {"group_defaults": {"financial": "private"}}
    }
    assert resolver.group_level(financial, {}).value == "private"


def test_internal_metadata_is_admin_only(resolver, admin_actor, hr_actor):
    group = get_group("internal_metadata")
    record = {"phone_visibility": "public"}

    assert resolver.resolve_group_visibility(admin_actor, group, record) == FieldVisibility.VISIBLE
    assert resolver.resolve_group_visibility(hr_actor, group, record) == FieldVisibility.HIDDEN
    assert resolver.resolve_group_visibility(None, group, record) == FieldVisibility.HIDDEN


def test_financial_group_is_gated_by_role(resolver, admin_actor, hr_actor, manager_actor, settings):
    group = get_group("financial")

    assert resolver.group_viewer_roles(group) == ["admin", "hr"]
    assert resolver.resolve_group_visibility(hr_actor, group, {}) == FieldVisibility.VISIBLE
    assert resolver.resolve_group_visibility(manager_actor, group, {}) == FieldVisibility.HIDDEN
    assert resolver.resolve_group_visibility(None, group, {}) == FieldVisibility.HIDDEN
    assert resolver.group_viewer_roles(get_group("phone")) is None

    settings.PERSONNEL_GUARD = {
        "visibility_settings": {"group_viewer_roles": {"financial": ["admin", "hr", "manager"]}}
    }
    assert resolver.resolve_group_visibility(manager_actor, group, {}) == FieldVisibility.VISIBLE
