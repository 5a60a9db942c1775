"""
Unit tests for roles, tiers and the actor context.
"""

from types import SimpleNamespace

import pytest
from django.test import RequestFactory

from personnel_guard.security.context import Actor, get_client_ip, get_correlation_id
from personnel_guard.security.roles import (
    AccessTier,
    Role,
    VisibilityLevel,
    normalize_role,
    role_in,
    tier_for_role,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "role,tier",
    [
        ("admin", AccessTier.PRIVATE),
        ("ADMIN", AccessTier.PRIVATE),
        ("hr", AccessTier.RESTRICTED),
        ("manager", AccessTier.RESTRICTED),
        ("user", AccessTier.INTERNAL),
        ("adminn", AccessTier.INTERNAL),
        ("superuser", AccessTier.INTERNAL),
        ("", AccessTier.INTERNAL),
    ],
)
def test_tier_for_role(role, tier):
    assert tier_for_role(role) == tier


def test_unknown_roles_never_reach_restricted_tier():
    for role in ["Admin ", " hr", "root", "hr-manager", "director"]:
        if normalize_role(role) is None:
            assert tier_for_role(role) < AccessTier.RESTRICTED


def test_visibility_level_parse_defaults_unknown_to_private():
    assert VisibilityLevel.parse("PUBLIC") == VisibilityLevel.PUBLIC
    assert VisibilityLevel.parse("secret") == VisibilityLevel.PRIVATE
    assert VisibilityLevel.parse(None) == VisibilityLevel.PRIVATE
    assert VisibilityLevel.RESTRICTED.required_tier == AccessTier.RESTRICTED


def test_role_in_normalizes_names():
    assert role_in("HR", ["admin", "hr"])
    assert role_in(Role.ADMIN, ["admin"])
    assert not role_in("manager", ["admin", "hr"])
    assert not role_in(None, ["admin"])


def test_actor_from_user_maps_superuser_and_anonymous():
    anonymous = SimpleNamespace(is_authenticated=False)
    assert Actor.from_user(anonymous) is None
    assert Actor.from_user(None) is None

    superuser = SimpleNamespace(is_authenticated=True, is_superuser=True, pk=7, username="root")
    actor = Actor.from_user(superuser)
    assert actor.role == "admin"
    assert actor.is_admin
    assert actor.user_id == 7

    staff = SimpleNamespace(is_authenticated=True, is_superuser=False, pk=8, username="staff", role="HR")
    staff_actor = Actor.from_user(staff)
    assert staff_actor.role_name == "hr"
    assert staff_actor.tier == AccessTier.RESTRICTED


def test_actor_from_request_reads_request_metadata():
    request = RequestFactory().get(
        "/officers/1",
        HTTP_X_FORWARDED_FOR="203.0.113.9, 10.0.0.1",
        HTTP_USER_AGENT="pytest-agent",
        HTTP_X_CORRELATION_ID="corr-123",
    )
    request.user = SimpleNamespace(is_authenticated=True, is_superuser=False, pk=3, username="m", role="manager")

    actor = Actor.from_request(request)

    assert actor.client_ip == "203.0.113.9"
    assert actor.user_agent == "pytest-agent"
    assert get_client_ip(request) == "203.0.113.9"
    assert get_correlation_id(request) == "corr-123"


def test_correlation_id_generated_when_missing():
    first = get_correlation_id()
    second = get_correlation_id(RequestFactory().get("/"))
    assert first and second and first != second
