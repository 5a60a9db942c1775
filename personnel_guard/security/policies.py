"""
Field access policy store.

Per (role, field) overrides read from ``FieldAccessPolicy`` rows. Lookups
return immutable snapshots so callers cannot mutate stored policy through a
decision object. Database errors propagate; callers decide how to degrade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from django.db import transaction

from .roles import normalize_role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldPolicy:
    role: str
    field_name: str
    can_view: bool
    can_unmask: bool
    requires_mfa: bool
    requires_approval: bool
    max_requests_per_day: int

    @classmethod
    def from_model(cls, row: Any) -> "FieldPolicy":
        return cls(
            role=row.role,
            field_name=row.field_name,
            can_view=bool(row.can_view),
            can_unmask=bool(row.can_unmask),
            requires_mfa=bool(row.requires_mfa),
            requires_approval=bool(row.requires_approval),
            max_requests_per_day=int(row.max_requests_per_day or 0),
        )


class PolicyStore:
    """Reads field access policies from a database alias."""

    def __init__(self, using: str = "default") -> None:
        self.using = using

    def _role_key(self, role: Any) -> str:
        parsed = normalize_role(role)
        if parsed is not None:
            return parsed.value
        return str(role or "").strip().lower()

    def get_policy(self, role: Any, field_name: str) -> Optional[FieldPolicy]:
        """
        Return the policy for ``(role, field_name)`` or None when absent.

        Raises:
            django.db.DatabaseError: when the policy table cannot be read.
        """
        from .models import FieldAccessPolicy

        row = (
            FieldAccessPolicy.objects.using(self.using)
            .filter(role=self._role_key(role), field_name=field_name)
            .first()
        )
        return FieldPolicy.from_model(row) if row is not None else None

    def list_policies(self, role: Any = None) -> list[FieldPolicy]:
        from .models import FieldAccessPolicy

        queryset = FieldAccessPolicy.objects.using(self.using).order_by("role", "field_name")
        if role is not None:
            queryset = queryset.filter(role=self._role_key(role))
        return [FieldPolicy.from_model(row) for row in queryset]

    def upsert_policies(self, policies: Iterable[dict[str, Any]]) -> tuple[int, int]:
        """
        Insert or update policy rows.

        Returns:
            ``(created, updated)`` counts.
        """
        from .models import FieldAccessPolicy

        created = updated = 0
        with transaction.atomic(using=self.using):
            for entry in policies:
                values = dict(entry)
                role = self._role_key(values.pop("role"))
                if normalize_role(role) is None:
                    logger.warning("Seeding policy for unknown role %r", role)
                field_name = values.pop("field_name")
                _, was_created = FieldAccessPolicy.objects.using(self.using).update_or_create(
                    role=role, field_name=field_name, defaults=values
                )
                if was_created:
                    created += 1
                else:
                    updated += 1
        return created, updated
