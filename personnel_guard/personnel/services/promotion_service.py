"""
Promotion use case.
"""

import logging
from typing import Optional

from ...db.transactions import TransactionScope
from ...errors import ValidationError
from ...security.context import Actor
from ..dtos import PromotionCommand
from ..models import Designation, Officer, PromotionEvent
from .base import StateTransitionService

logger = logging.getLogger(__name__)


def _check_grade_increase(from_grade: Optional[int], to_grade: Optional[int]) -> None:
    if from_grade is None or to_grade is None:
        return
    if to_grade <= from_grade:
        raise ValidationError(
            "Target grade must be higher than the current grade",
            code="grade_not_increasing",
            from_grade=from_grade,
            to_grade=to_grade,
        )


class PromotionService(StateTransitionService):
    """Promotes an officer to a higher-ranked designation as one atomic unit."""

    operation_name = "officer.promotion"

    def promote(
        self,
        actor: Optional[Actor],
        command: PromotionCommand,
        correlation_id: Optional[str] = None,
    ) -> PromotionEvent:
        """
        Record a promotion and update the officer's designation and pay.

        Raises:
            PermissionDenied: actor role may not mutate personnel records.
            ValidationError: future date, target rank not strictly higher,
                undefined grade levels or non-increasing grade numbers.
            ReferentialIntegrityError: officer or designation missing.
        """
        actor = self.check_actor(actor)
        self.check_effective_date(command.effective_date, "effective_date")
        self.check_choice(command.promotion_type, PromotionEvent.PROMOTION_TYPES, "promotion_type")
        _check_grade_increase(command.from_grade, command.to_grade)

        def handler(scope: TransactionScope) -> PromotionEvent:
            officer = self.get_or_fail(Officer, command.officer_id, scope.using, lock=True)
            from_designation_id = command.from_designation_id or officer.designation_id
            if not from_designation_id:
                raise ValidationError(
                    "Officer has no current designation",
                    code="missing_designation",
                    officer_id=officer.pk,
                )
            from_designation = self.get_or_fail(Designation, from_designation_id, scope.using)
            to_designation = self.get_or_fail(Designation, command.to_designation_id, scope.using)

            if from_designation.grade_level is None or to_designation.grade_level is None:
                raise ValidationError(
                    "Both designations need a grade level",
                    code="grade_level_undefined",
                    from_designation_id=from_designation.pk,
                    to_designation_id=to_designation.pk,
                )
            if not to_designation.outranks(from_designation):
                raise ValidationError(
                    "Target designation must rank strictly higher",
                    code="rank_not_higher",
                    from_grade_level=from_designation.grade_level,
                    to_grade_level=to_designation.grade_level,
                )
            from_grade = (
                command.from_grade if command.from_grade is not None else officer.current_grade
            )
            _check_grade_increase(from_grade, command.to_grade)

            is_latest = not PromotionEvent.objects.using(scope.using).filter(
                officer_id=officer.pk, promotion_date__gt=command.effective_date
            ).exists()
            event = self._insert_event(
                scope, actor, officer, command, from_designation, to_designation, from_grade
            )
            if is_latest:
                self._apply_current_state(scope, officer, command, to_designation)
            else:
                logger.info(
                    "Back-dated promotion %s recorded without changing current designation",
                    event.pk,
                )
            self._log_activity(scope, actor, officer, event)
            return event

        return self.engine.with_transaction(
            handler, correlation_id=correlation_id, operation_name=self.operation_name
        )

    def _insert_event(
        self,
        scope: TransactionScope,
        actor: Actor,
        officer: Officer,
        command: PromotionCommand,
        from_designation: Designation,
        to_designation: Designation,
        from_grade: Optional[int],
    ) -> PromotionEvent:
        event = PromotionEvent(
            officer=officer,
            from_designation=from_designation,
            to_designation=to_designation,
            from_grade=from_grade,
            to_grade=command.to_grade,
            from_scale=officer.current_scale or "",
            to_scale=command.to_scale or "",
            from_basic_salary=officer.basic_salary,
            to_basic_salary=command.to_basic_salary,
            promotion_date=command.effective_date,
            promotion_type=command.promotion_type,
            order_number=command.order_number or "",
            order_date=command.order_date,
            reason=command.reason or "",
            remarks=command.remarks or "",
            created_by_id=actor.user_id,
            correlation_id=scope.correlation_id,
        )
        event.save(using=scope.using)
        return event

    def _apply_current_state(
        self,
        scope: TransactionScope,
        officer: Officer,
        command: PromotionCommand,
        to_designation: Designation,
    ) -> None:
        officer.designation = to_designation
        update_fields = ["designation", "updated_at"]
        if command.to_grade is not None:
            officer.current_grade = command.to_grade
            update_fields.append("current_grade")
        if command.to_scale:
            officer.current_scale = command.to_scale
            update_fields.append("current_scale")
        if command.to_basic_salary is not None:
            officer.basic_salary = command.to_basic_salary
            update_fields.append("basic_salary")
        officer.save(using=scope.using, update_fields=update_fields)

    def _log_activity(
        self, scope: TransactionScope, actor: Actor, officer: Officer, event: PromotionEvent
    ) -> None:
        self.activity.log(
            actor,
            action="officer_promoted",
            target_type="officer",
            target_id=officer.pk,
            description=f"Promoted {officer.full_name} to designation {event.to_designation_id}",
            details={
                "promotion_id": event.pk,
                "from_designation_id": event.from_designation_id,
                "to_designation_id": event.to_designation_id,
                "from_grade": event.from_grade,
                "to_grade": event.to_grade,
                "promotion_date": event.promotion_date.isoformat(),
                "promotion_type": event.promotion_type,
            },
            correlation_id=scope.correlation_id,
            using=scope.using,
        )


promotion_service = PromotionService()
