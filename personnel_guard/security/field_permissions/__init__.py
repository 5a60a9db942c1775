"""
Field-level visibility and masking for officer records.

This package provides:
- One-way masking transforms for phone numbers, emails and identifiers
- The visibility resolver combining role tiers with policy overrides
- The record filter applying both to officer records

Example usage:
    >>> from personnel_guard.security.field_permissions import (
    ...     FilterOptions,
    ...     filter_record,
    ... )
    >>> filtered = filter_record(officer, actor, FilterOptions(log_access=True))
    >>> filtered["personal_mobile"]
    '017*****678'
"""

from .defaults import SENSITIVITY_GROUPS, get_group, get_group_for_field
from .filters import RecordFilter, filter_record, filter_records, get_record_filter
from .manager import VisibilityResolver, visibility_resolver
from .masking import (
    mask_bank_account,
    mask_email,
    mask_field,
    mask_identifier,
    mask_phone,
    mask_string,
)
from .types import FieldVisibility, FilterOptions, SensitivityGroup

__all__ = [
    # Types
    "FieldVisibility",
    "FilterOptions",
    "SensitivityGroup",
    "SENSITIVITY_GROUPS",
    "get_group",
    "get_group_for_field",
    # Masking
    "mask_phone",
    "mask_email",
    "mask_identifier",
    "mask_string",
    "mask_bank_account",
    "mask_field",
    # Resolver
    "VisibilityResolver",
    "visibility_resolver",
    # Filter
    "RecordFilter",
    "filter_record",
    "filter_records",
    "get_record_filter",
]
