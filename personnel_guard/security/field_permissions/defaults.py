"""
Default sensitivity groups for officer records.
"""

from typing import Optional

from .types import SensitivityGroup

PHONE_GROUP = SensitivityGroup(
    name="phone",
    fields=("personal_mobile", "official_mobile"),
    visibility_attr="phone_visibility",
    policy_field="personal_mobile",
    unmask_key="phone",
)

EMAIL_GROUP = SensitivityGroup(
    name="email",
    fields=("personal_email", "official_email"),
    visibility_attr="email_visibility",
    policy_field="personal_email",
    unmask_key="email",
)

IDENTIFIER_GROUP = SensitivityGroup(
    name="identifier",
    fields=("nid_number", "passport_number", "tin_number"),
    visibility_attr="nid_visibility",
    policy_field="nid_number",
    unmask_key="nid",
)

PERSONAL_GROUP = SensitivityGroup(
    name="personal",
    fields=(
        "father_name",
        "mother_name",
        "date_of_birth",
        "blood_group",
        "religion",
        "marital_status",
        "spouse_name",
        "children_count",
        "emergency_contact_name",
        "emergency_contact_phone",
        "emergency_contact_relation",
        "present_address",
        "permanent_address",
        "district",
        "division",
        "post_code",
    ),
)

FINANCIAL_GROUP = SensitivityGroup(
    name="financial",
    fields=(
        "current_grade",
        "current_scale",
        "basic_salary",
        "current_salary",
        "performance_rating",
        "last_appraisal_date",
        "bank_name",
        "bank_account_name",
        "bank_account_number",
        "bank_branch",
    ),
    policy_field="basic_salary",
    viewer_roles=("admin", "hr"),
)

INTERNAL_METADATA_GROUP = SensitivityGroup(
    name="internal_metadata",
    fields=(
        "created_by",
        "updated_by",
        "notes",
        "internal_notes",
        "phone_visibility",
        "email_visibility",
        "nid_visibility",
        "verification_status",
        "consent_record",
        "profile_published",
    ),
    always_private=True,
)

# Evaluated in order; internal metadata last so visibility attributes are
# read before they are removed.
SENSITIVITY_GROUPS: tuple[SensitivityGroup, ...] = (
    PHONE_GROUP,
    EMAIL_GROUP,
    IDENTIFIER_GROUP,
    PERSONAL_GROUP,
    FINANCIAL_GROUP,
    INTERNAL_METADATA_GROUP,
)


def get_group(name: str) -> SensitivityGroup:
    for group in SENSITIVITY_GROUPS:
        if group.name == name:
            return group
    raise KeyError(name)


def get_group_for_field(field_name: str) -> Optional[SensitivityGroup]:
    for group in SENSITIVITY_GROUPS:
        if field_name in group.fields:
            return group
    return None
