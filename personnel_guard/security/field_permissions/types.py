"""
Type definitions for the field visibility system.

This module provides:
- FieldVisibility enum for the outcome of a field decision
- SensitivityGroup dataclass describing a group of related fields
- FilterOptions dataclass for record filtering switches
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class FieldVisibility(Enum):
    """
    Outcome of a visibility decision for one field:
    - VISIBLE: value is shown in full
    - MASKED: value is replaced with its masked form
    - HIDDEN: field is removed from the output
    """

    VISIBLE = "visible"
    MASKED = "masked"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class SensitivityGroup:
    """
    A set of fields sharing one visibility setting.

    Attributes:
        name: Group name, e.g. ``"phone"``.
        fields: Field names belonging to the group.
        visibility_attr: Record attribute holding the per-record level,
            or None when the group only has a default level.
        policy_field: Field name used for policy lookups and unmask decisions.
        unmask_key: Key used in ``_unmask_info`` for this group.
        always_private: Group is visible to the private tier only, regardless
            of any per-record setting.
        viewer_roles: Roles allowed to see the group at all, or None when
            the tier and policy checks alone decide.
    """

    name: str
    fields: tuple[str, ...]
    visibility_attr: Optional[str] = None
    policy_field: Optional[str] = None
    unmask_key: Optional[str] = None
    always_private: bool = False
    viewer_roles: Optional[tuple[str, ...]] = None

    @property
    def maskable(self) -> bool:
        return self.unmask_key is not None


@dataclass(frozen=True)
class FilterOptions:
    """Switches accepted by the record filter."""

    apply_masking: bool = True
    log_access: bool = False
    access_reason: str = ""
    correlation_id: Optional[str] = None


DEFAULT_FILTER_OPTIONS = FilterOptions()
