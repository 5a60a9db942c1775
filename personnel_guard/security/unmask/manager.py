"""
Unmask workflow manager.

An unmask request moves from ``pending`` to exactly one of ``approved``,
``rejected`` or ``expired``. Creation runs the daily quota check and the insert
in one engine transaction, so concurrent requests cannot overshoot the quota.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from django.utils import timezone

from ...config_proxy import get_setting
from ...db.transactions import TransactionEngine, TransactionScope, transaction_engine
from ...errors import (
    PermissionDenied,
    QuotaExceeded,
    ReferentialIntegrityError,
    SecondFactorError,
    ValidationError,
)
from ..audit import AccessType, AuditRecorder, audit_recorder
from ..context import Actor
from ..field_permissions.defaults import SENSITIVITY_GROUPS, get_group_for_field
from ..field_permissions.manager import VisibilityResolver
from ..field_permissions.masking import mask_field
from ..field_permissions.types import FieldVisibility
from ..policies import PolicyStore
from ..roles import role_in
from .types import UnmaskDecision, UnmaskStatus, UnmaskTicket

logger = logging.getLogger(__name__)

UNMASKABLE_FIELDS = frozenset(
    name for group in SENSITIVITY_GROUPS if not group.always_private for name in group.fields
)


class UnmaskService:
    """Request, verify, approve and disclose full field values."""

    def __init__(
        self,
        engine: Optional[TransactionEngine] = None,
        policy_store: Optional[PolicyStore] = None,
        recorder: Optional[AuditRecorder] = None,
        clock: Callable[[], datetime] = timezone.now,
        resolver: Optional[VisibilityResolver] = None,
    ) -> None:
        self.engine = engine or transaction_engine
        self.policy_store = policy_store or PolicyStore(self.engine.using)
        self.resolver = resolver or VisibilityResolver(self.policy_store)
        self.recorder = recorder or audit_recorder
        self.clock = clock

    # Settings

    @property
    def code_length(self) -> int:
        return int(get_setting("unmask_settings.code_length", 6))

    @property
    def code_ttl(self) -> timedelta:
        return timedelta(seconds=int(get_setting("unmask_settings.code_ttl_seconds", 300)))

    @property
    def approval_ttl(self) -> timedelta:
        return timedelta(
            seconds=int(get_setting("unmask_settings.approval_ttl_seconds", 86400))
        )

    @property
    def default_max_requests(self) -> int:
        return int(get_setting("unmask_settings.default_max_requests_per_day", 5))

    @property
    def approver_roles(self) -> list[str]:
        return list(get_setting("unmask_settings.approver_roles", ["admin"]) or [])

    # Helpers

    def _requests(self, using: Optional[str] = None):
        from ..models import UnmaskRequest

        return UnmaskRequest.objects.using(using or self.engine.using)

    def _day_bounds(self, now: datetime) -> tuple[datetime, datetime]:
        local = timezone.localtime(now) if timezone.is_aware(now) else now
        start = local.replace(hour=0, minute=0, second=0, microsecond=0)
        return start, start + timedelta(days=1)

    def _count_today(
        self, actor: Actor, field_name: str, now: datetime, lock: bool = False, using=None
    ) -> int:
        start, end = self._day_bounds(now)
        queryset = self._requests(using).filter(
            user_id=actor.user_id,
            field_name=field_name,
            status__in=[UnmaskStatus.PENDING.value, UnmaskStatus.APPROVED.value],
            created_at__gte=start,
            created_at__lt=end,
        )
        if lock:
            return len(list(queryset.select_for_update().values_list("pk", flat=True)))
        return queryset.count()

    def _generate_code(self) -> str:
        return "".join(str(secrets.randbelow(10)) for _ in range(self.code_length))

    def expires_at(self, request: Any) -> Optional[datetime]:
        """Moment after which a pending request can no longer progress."""
        if request.requires_mfa and not request.mfa_verified:
            return request.mfa_code_expires_at
        return request.created_at + self.approval_ttl

    def _is_expired(self, request: Any, now: datetime) -> bool:
        deadline = self.expires_at(request)
        return deadline is not None and deadline <= now

    def _load_for_update(self, scope: TransactionScope, request_id: str):
        from ..models import UnmaskRequest

        try:
            return self._requests(scope.using).select_for_update().get(request_id=request_id)
        except UnmaskRequest.DoesNotExist:
            raise ValidationError(
                "Unmask request not found", code="request_not_found", request_id=request_id
            ) from None

    def _check_visibility(self, actor: Actor, officer: Any, field_name: str) -> None:
        group = get_group_for_field(field_name)
        visibility = (
            self.resolver.resolve_group_visibility(actor, group, officer.to_record())
            if group is not None
            else FieldVisibility.HIDDEN
        )
        if visibility == FieldVisibility.HIDDEN:
            raise PermissionDenied(
                "Field is not visible to this actor on this record",
                field_name=field_name,
                officer_id=officer.pk,
            )

    def _mark_expired(self, request: Any) -> None:
        request.status = UnmaskStatus.EXPIRED.value
        request.mfa_code = ""
        request.save(update_fields=["status", "mfa_code"])
        logger.info("Unmask request %s expired", request.request_id)

    # Decisions

    def _decide(
        self,
        actor: Optional[Actor],
        field_name: str,
        now: datetime,
        lock: bool = False,
        using: Optional[str] = None,
    ) -> UnmaskDecision:
        if actor is None:
            return UnmaskDecision(allowed=False, reason="Authentication required")

        policy = self.policy_store.get_policy(actor.role_name, field_name)
        if policy is None:
            requires_mfa = requires_approval = True
            max_per_day = self.default_max_requests
            if not actor.is_admin:
                return UnmaskDecision(
                    allowed=False,
                    max_requests_per_day=max_per_day,
                    reason="No access policy defined for this role",
                )
        else:
            requires_mfa = policy.requires_mfa
            requires_approval = policy.requires_approval
            max_per_day = policy.max_requests_per_day
            if not policy.can_unmask:
                return UnmaskDecision(
                    allowed=False,
                    requires_second_factor=requires_mfa,
                    requires_approval=requires_approval,
                    max_requests_per_day=max_per_day,
                    reason="Role may not unmask this field",
                )

        used = self._count_today(actor, field_name, now, lock=lock, using=using)
        if used >= max_per_day:
            return UnmaskDecision(
                allowed=False,
                requires_second_factor=requires_mfa,
                requires_approval=requires_approval,
                remaining_today=0,
                max_requests_per_day=max_per_day,
                reason=f"Daily limit exceeded ({max_per_day} requests)",
                quota_exceeded=True,
            )
        return UnmaskDecision(
            allowed=True,
            requires_second_factor=requires_mfa,
            requires_approval=requires_approval,
            remaining_today=max_per_day - used,
            max_requests_per_day=max_per_day,
        )

    def can_request_unmask(self, actor: Optional[Actor], field_name: str) -> UnmaskDecision:
        """
        Check whether ``actor`` may open a new unmask request for ``field_name``.

        Without a policy row only admins are allowed, with second factor and
        approval required and the configured default quota. Today's pending
        and approved requests count against the quota.
        """
        return self._decide(actor, field_name, self.clock())

    # Transitions

    def request_unmask(
        self,
        actor: Optional[Actor],
        officer_id: str,
        field_name: str,
        access_reason: str = "",
        correlation_id: Optional[str] = None,
    ) -> UnmaskTicket:
        """
        Open an unmask request.

        Raises:
            PermissionDenied: actor or role may not unmask ``field_name``, or
                the field is hidden from the actor on this officer's record.
            QuotaExceeded: the daily limit for (actor, field) is reached.
            ValidationError: ``field_name`` is not an unmaskable field.
            ReferentialIntegrityError: the officer does not exist.
        """
        if actor is None:
            raise PermissionDenied("Authentication required", field_name=field_name)
        if field_name not in UNMASKABLE_FIELDS:
            raise ValidationError(
                f"Field '{field_name}' cannot be unmasked",
                code="invalid_field",
                field_name=field_name,
            )

        def handler(scope: TransactionScope) -> UnmaskTicket:
            from ...personnel.models import Officer

            officer = Officer.objects.using(scope.using).filter(pk=officer_id).first()
            if officer is None:
                raise ReferentialIntegrityError(
                    "Officer not found", code="officer_not_found", officer_id=officer_id
                )
            self._check_visibility(actor, officer, field_name)

            now = self.clock()
            decision = self._decide(actor, field_name, now, lock=True, using=scope.using)
            if decision.quota_exceeded:
                raise QuotaExceeded(
                    decision.reason or "Daily unmask limit reached",
                    field_name=field_name,
                    max_requests_per_day=decision.max_requests_per_day,
                )
            if not decision.allowed:
                raise PermissionDenied(
                    decision.reason or "Unmask not permitted", field_name=field_name
                )

            code = self._generate_code() if decision.requires_second_factor else None
            code_expires_at = now + self.code_ttl if code else None
            auto_approve = not decision.requires_second_factor and not decision.requires_approval
            status = UnmaskStatus.APPROVED if auto_approve else UnmaskStatus.PENDING

            request = self._requests(scope.using).create(
                user_id=actor.user_id,
                user_role=actor.role_name,
                officer_id=officer_id,
                field_name=field_name,
                status=status.value,
                mfa_code=code or "",
                mfa_code_expires_at=code_expires_at,
                requires_mfa=decision.requires_second_factor,
                requires_approval=decision.requires_approval,
                access_reason=access_reason or "",
                decided_at=now if auto_approve else None,
                created_at=now,
            )
            logger.info(
                "Unmask request %s (%s) for %s.%s by user %s",
                request.request_id,
                status.value,
                officer_id,
                field_name,
                actor.user_id,
            )
            return UnmaskTicket(
                request_id=request.request_id,
                status=status,
                requires_second_factor=decision.requires_second_factor,
                requires_approval=decision.requires_approval,
                code=code,
                code_expires_at=code_expires_at,
                expires_at=self.expires_at(request),
            )

        return self.engine.with_transaction(
            handler, correlation_id=correlation_id, operation_name="unmask.request"
        )

    def verify_code(self, request_id: str, code: str) -> UnmaskStatus:
        """
        Check the second-factor code of a pending request.

        Returns:
            The request status after verification.

        Raises:
            SecondFactorError: unknown request, request not pending, expired
                or mismatched code.
        """

        def handler(scope: TransactionScope):
            try:
                request = self._load_for_update(scope, request_id)
            except ValidationError as exc:
                return None, SecondFactorError(exc.message, code="request_not_found")

            if not request.is_pending:
                return None, SecondFactorError(
                    f"Request is {request.status}", code="request_not_pending"
                )
            if not request.requires_mfa or request.mfa_verified:
                return None, SecondFactorError(
                    "No second factor pending for this request", code="no_code_pending"
                )
            now = self.clock()
            if request.mfa_code_expires_at is None or request.mfa_code_expires_at <= now:
                self._mark_expired(request)
                return None, SecondFactorError("Code expired", code="code_expired")
            if not secrets.compare_digest(str(request.mfa_code), str(code or "")):
                logger.warning("Second factor mismatch for unmask request %s", request_id)
                return None, SecondFactorError("Invalid code", code="invalid_code")

            request.mfa_verified = True
            request.mfa_code = ""
            update_fields = ["mfa_verified", "mfa_code"]
            if not request.requires_approval:
                request.status = UnmaskStatus.APPROVED.value
                request.decided_at = now
                update_fields += ["status", "decided_at"]
            request.save(update_fields=update_fields)
            return UnmaskStatus(request.status), None

        status, error = self.engine.with_transaction(
            handler, operation_name="unmask.verify_code"
        )
        if error is not None:
            raise error
        return status

    def _decide_request(
        self, request_id: str, approver: Optional[Actor], approve: bool, reason: str
    ) -> UnmaskStatus:
        if approver is None or not role_in(approver.role, self.approver_roles):
            raise PermissionDenied("Approver role required", request_id=request_id)

        def handler(scope: TransactionScope):
            request = self._load_for_update(scope, request_id)
            if not request.is_pending:
                return None, ValidationError(
                    f"Request is {request.status}", code="request_not_pending"
                )
            if approver.user_id is not None and approver.user_id == request.user_id:
                return None, PermissionDenied(
                    "Requesters cannot decide their own request", request_id=request_id
                )
            now = self.clock()
            if self._is_expired(request, now):
                self._mark_expired(request)
                return None, ValidationError("Request expired", code="request_expired")
            if approve and request.requires_mfa and not request.mfa_verified:
                return None, SecondFactorError(
                    "Second factor not verified", code="second_factor_required"
                )

            request.status = (UnmaskStatus.APPROVED if approve else UnmaskStatus.REJECTED).value
            request.decided_by_id = approver.user_id
            request.decided_at = now
            request.decision_reason = reason or ""
            request.mfa_code = ""
            request.save(
                update_fields=[
                    "status",
                    "decided_by_id",
                    "decided_at",
                    "decision_reason",
                    "mfa_code",
                ]
            )
            logger.info(
                "Unmask request %s %s by user %s",
                request_id,
                request.status,
                approver.user_id,
            )
            return UnmaskStatus(request.status), None

        operation = "unmask.approve" if approve else "unmask.reject"
        status, error = self.engine.with_transaction(handler, operation_name=operation)
        if error is not None:
            raise error
        return status

    def approve(self, request_id: str, approver: Optional[Actor], reason: str = "") -> UnmaskStatus:
        return self._decide_request(request_id, approver, True, reason)

    def reject(self, request_id: str, approver: Optional[Actor], reason: str = "") -> UnmaskStatus:
        return self._decide_request(request_id, approver, False, reason)

    def disclose(
        self,
        request_id: str,
        actor: Optional[Actor],
        correlation_id: Optional[str] = None,
    ) -> Any:
        """
        Return the full value of an approved request, once.

        The ``unmask`` audit record is written on the engine's database alias
        in the same transaction, whatever ``audit_settings.database`` says; if
        it cannot be written nothing is disclosed. Record visibility is checked
        again, so a field hidden after approval is not disclosed.

        Raises:
            PermissionDenied: actor is not the requester, or the field is no
                longer visible to the actor on this record.
            ValidationError: request not approved, already disclosed or expired.
            AuditWriteError: the audit record could not be written.
        """
        if actor is None:
            raise PermissionDenied("Authentication required", request_id=request_id)

        def handler(scope: TransactionScope) -> Any:
            request = self._load_for_update(scope, request_id)
            if request.user_id != actor.user_id:
                raise PermissionDenied(
                    "Only the requester may view this value", request_id=request_id
                )
            if request.status != UnmaskStatus.APPROVED.value:
                raise ValidationError(
                    f"Request is {request.status}", code="request_not_approved"
                )
            if request.disclosed_at is not None:
                raise ValidationError("Value already disclosed", code="already_disclosed")
            now = self.clock()
            if request.created_at + self.approval_ttl <= now:
                raise ValidationError("Request expired", code="request_expired")

            officer = request.officer
            self._check_visibility(actor, officer, request.field_name)
            value = getattr(officer, request.field_name)
            request.disclosed_at = now
            request.save(update_fields=["disclosed_at"])
            self.recorder.record(
                actor,
                officer,
                request.field_name,
                mask_field(request.field_name, value),
                AccessType.UNMASK,
                correlation_id=scope.correlation_id,
                access_reason=request.access_reason,
                mfa_verified=request.mfa_verified,
                using=scope.using,
            )
            return value

        return self.engine.with_transaction(
            handler, correlation_id=correlation_id, operation_name="unmask.disclose"
        )

    def expire_stale(self, now: Optional[datetime] = None) -> int:
        """Mark every overdue pending request expired; returns the count."""
        now = now or self.clock()

        def handler(scope: TransactionScope) -> int:
            expired = 0
            pending = self._requests(scope.using).select_for_update().filter(
                status=UnmaskStatus.PENDING.value
            )
            for request in pending:
                if self._is_expired(request, now):
                    self._mark_expired(request)
                    expired += 1
            return expired

        count = self.engine.with_transaction(handler, operation_name="unmask.expire_stale")
        if count:
            logger.info("Expired %s stale unmask requests", count)
        return count


unmask_service = UnmaskService()
