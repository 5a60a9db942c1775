"""
Default configuration for the personnel-guard library.

Every setting the library consumes has a default here. Projects override
individual keys through the ``PERSONNEL_GUARD`` Django setting; sections are
merged key by key, so a project only lists what it changes.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "personnel-guard"


LIBRARY_DEFAULTS: dict[str, Any] = {
    "visibility_settings": {
        # Level used when a record carries no per-group setting.
        "group_defaults": {
            "phone": "internal",
            "email": "internal",
            "identifier": "restricted",
            "personal": "restricted",
            "financial": "restricted",
            "internal_metadata": "private",
        },
        # Role gate per group; overrides the group declaration when set.
        "group_viewer_roles": {},
    },
    "unmask_settings": {
        "code_length": 6,
        "code_ttl_seconds": 300,
        "approval_ttl_seconds": 24 * 60 * 60,
        # Quota applied when no policy row exists for (role, field).
        "default_max_requests_per_day": 5,
        "approver_roles": ["admin"],
    },
    "audit_settings": {
        "enabled": True,
        "write_retries": 2,
        "database": "default",
    },
    "personnel_settings": {
        "mutation_roles": ["admin", "hr"],
    },
    "observability_settings": {
        "capture_exceptions": False,
    },
}


# Seed table installed by ``manage.py seed_field_policies``.
DEFAULT_FIELD_POLICIES: list[dict[str, Any]] = [
    # Admin: full access, second factor on identifiers.
    {"role": "admin", "field_name": "personal_mobile", "can_view": True, "can_unmask": True,
     "requires_mfa": False, "requires_approval": False, "max_requests_per_day": 50},
    {"role": "admin", "field_name": "personal_email", "can_view": True, "can_unmask": True,
     "requires_mfa": False, "requires_approval": False, "max_requests_per_day": 50},
    {"role": "admin", "field_name": "nid_number", "can_view": True, "can_unmask": True,
     "requires_mfa": True, "requires_approval": False, "max_requests_per_day": 20},
    {"role": "admin", "field_name": "basic_salary", "can_view": True, "can_unmask": True,
     "requires_mfa": False, "requires_approval": False, "max_requests_per_day": 50},
    # HR: may unmask contact data, identifiers need approval.
    {"role": "hr", "field_name": "personal_mobile", "can_view": True, "can_unmask": True,
     "requires_mfa": True, "requires_approval": False, "max_requests_per_day": 10},
    {"role": "hr", "field_name": "personal_email", "can_view": True, "can_unmask": True,
     "requires_mfa": True, "requires_approval": False, "max_requests_per_day": 10},
    {"role": "hr", "field_name": "nid_number", "can_view": True, "can_unmask": True,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 5},
    {"role": "hr", "field_name": "basic_salary", "can_view": True, "can_unmask": False,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 0},
    # Manager: masked contact data only, no financial data.
    {"role": "manager", "field_name": "personal_mobile", "can_view": True, "can_unmask": True,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 5},
    {"role": "manager", "field_name": "personal_email", "can_view": True, "can_unmask": True,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 5},
    {"role": "manager", "field_name": "nid_number", "can_view": True, "can_unmask": False,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 0},
    {"role": "manager", "field_name": "basic_salary", "can_view": False, "can_unmask": False,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 0},
    # Regular users: may see what the record allows, never unmask.
    {"role": "user", "field_name": "personal_mobile", "can_view": True, "can_unmask": False,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 0},
    {"role": "user", "field_name": "personal_email", "can_view": True, "can_unmask": False,
     "requires_mfa": True, "requires_approval": True, "max_requests_per_day": 0},
]
