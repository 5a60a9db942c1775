"""
Visibility resolver for sensitive officer fields.

This module provides the VisibilityResolver class which handles:
- Tier checks of a viewer against a declared visibility level
- Policy store overrides per (role, field)
- Group level resolution from per-record settings and configured defaults
"""

import logging
from typing import Any, Mapping, Optional

from django.db import DatabaseError, transaction

from ...config_proxy import get_setting
from ..context import Actor
from ..policies import FieldPolicy, PolicyStore
from ..roles import AccessTier, VisibilityLevel, role_in
from .types import FieldVisibility, SensitivityGroup

logger = logging.getLogger(__name__)


class VisibilityResolver:
    """Decides whether an actor may see a field at a given visibility level."""

    def __init__(self, policy_store: Optional[PolicyStore] = None) -> None:
        self.policy_store = policy_store if policy_store is not None else PolicyStore()

    def _lookup_policy(self, actor: Actor, field_name: str) -> Optional[FieldPolicy]:
        using = getattr(self.policy_store, "using", "default")
        try:
            with transaction.atomic(using=using):
                return self.policy_store.get_policy(actor.role_name, field_name)
        except DatabaseError as exc:
            logger.warning(
                "Policy store unavailable for %s/%s, using tier decision: %s",
                actor.role_name,
                field_name,
                exc,
            )
            return None

    def has_view_permission(
        self,
        actor: Optional[Actor],
        field_name: str,
        visibility_level: Any = VisibilityLevel.INTERNAL,
    ) -> bool:
        """
        Check whether ``actor`` may see ``field_name`` at ``visibility_level``.

        The tier check runs first; a policy row for (role, field) can only
        narrow the result through its ``can_view`` flag.

        Args:
            actor: The authenticated actor, or None for anonymous access.
            field_name: Field being displayed.
            visibility_level: Declared level; unknown values count as private.

        Returns:
            True if the value may be shown (masked or in full).
        """
        level = VisibilityLevel.parse(visibility_level)
        if actor is None:
            return level == VisibilityLevel.PUBLIC

        if actor.tier < level.required_tier:
            return False

        policy = self._lookup_policy(actor, field_name)
        if policy is not None:
            return policy.can_view
        return True

    def group_level(
        self, group: SensitivityGroup, record: Mapping[str, Any]
    ) -> VisibilityLevel:
        """Visibility level of ``group`` for ``record``."""
        if group.always_private:
            return VisibilityLevel.PRIVATE
        value = record.get(group.visibility_attr) if group.visibility_attr else None
        if not value:
            defaults = get_setting("visibility_settings.group_defaults", {}) or {}
            value = defaults.get(group.name, VisibilityLevel.PRIVATE.value)
        return VisibilityLevel.parse(value)

    def group_viewer_roles(self, group: SensitivityGroup) -> Optional[list[str]]:
        """Roles allowed to see ``group``; None when the group has no role gate."""
        configured = get_setting("visibility_settings.group_viewer_roles", {}) or {}
        roles = configured.get(group.name, group.viewer_roles)
        return list(roles) if roles is not None else None

    def resolve_group_visibility(
        self,
        actor: Optional[Actor],
        group: SensitivityGroup,
        record: Mapping[str, Any],
    ) -> FieldVisibility:
        """Return VISIBLE or HIDDEN for a whole sensitivity group."""
        level = self.group_level(group, record)
        viewer_roles = self.group_viewer_roles(group)
        if viewer_roles is not None and (actor is None or not role_in(actor.role, viewer_roles)):
            return FieldVisibility.HIDDEN
        if group.always_private:
            allowed = actor is not None and actor.tier >= AccessTier.PRIVATE
        else:
            field_name = group.policy_field or group.fields[0]
            allowed = self.has_view_permission(actor, field_name, level)
        return FieldVisibility.VISIBLE if allowed else FieldVisibility.HIDDEN


visibility_resolver = VisibilityResolver()
