"""
Shared plumbing for state-transition services.
"""

from datetime import date, datetime
from typing import Callable, Optional

from django.utils import timezone

from ...config_proxy import get_setting
from ...db.transactions import TransactionEngine, transaction_engine
from ...errors import PermissionDenied, ReferentialIntegrityError, ValidationError
from ...security.context import Actor
from ...security.roles import role_in
from .activity import ActivityLogger, activity_logger


class StateTransitionService:
    """Base class holding the injected engine, clock and activity logger."""

    operation_name = "state_transition"

    def __init__(
        self,
        engine: Optional[TransactionEngine] = None,
        clock: Callable[[], datetime] = timezone.now,
        activity: Optional[ActivityLogger] = None,
    ) -> None:
        self.engine = engine or transaction_engine
        self.clock = clock
        self.activity = activity or activity_logger

    def today(self) -> date:
        now = self.clock()
        return timezone.localdate(now) if timezone.is_aware(now) else now.date()

    def check_actor(self, actor: Optional[Actor]) -> Actor:
        if actor is None:
            raise PermissionDenied("Authentication required", operation=self.operation_name)
        allowed = get_setting("personnel_settings.mutation_roles", ["admin", "hr"]) or []
        if not role_in(actor.role, allowed):
            raise PermissionDenied(
                f"Role '{actor.role_name}' may not perform {self.operation_name}",
                operation=self.operation_name,
                role=actor.role_name,
            )
        return actor

    def check_effective_date(self, effective_date: date, field: str) -> None:
        if effective_date is None:
            raise ValidationError(f"{field} is required", code="missing_date", field=field)
        if isinstance(effective_date, datetime):
            effective_date = effective_date.date()
        if effective_date > self.today():
            raise ValidationError(
                f"{field} cannot be in the future",
                code="future_date",
                field=field,
                value=effective_date.isoformat(),
            )

    def check_choice(self, value: str, choices, field: str) -> None:
        if value not in {key for key, _ in choices}:
            raise ValidationError(
                f"Invalid {field} '{value}'", code="invalid_choice", field=field
            )

    def get_or_fail(self, model, pk, using: str, lock: bool = False, label: Optional[str] = None):
        """Fetch ``model`` row ``pk`` or raise ``ReferentialIntegrityError``."""
        queryset = model.objects.using(using)
        if lock:
            queryset = queryset.select_for_update()
        try:
            return queryset.get(pk=pk)
        except model.DoesNotExist:
            name = label or model._meta.model_name
            raise ReferentialIntegrityError(
                f"{name} '{pk}' does not exist",
                code=f"{name}_not_found",
                **{f"{name}_id": pk},
            ) from None
