"""
Office transfer use case.
"""

import logging
from typing import Optional

from ...db.transactions import TransactionScope
from ...errors import ValidationError
from ...security.context import Actor
from ..dtos import TransferCommand
from ..models import Designation, Office, Officer, TransferEvent
from .base import StateTransitionService

logger = logging.getLogger(__name__)


class TransferService(StateTransitionService):
    """Moves an officer to another office as one atomic unit."""

    operation_name = "officer.transfer"

    def transfer(
        self,
        actor: Optional[Actor],
        command: TransferCommand,
        correlation_id: Optional[str] = None,
    ) -> TransferEvent:
        """
        Record a transfer and move the officer's current office.

        The transfer event, the officer update and the activity log entry are
        written in one transaction. A back-dated transfer older than the
        latest recorded one is kept as history without moving current state.

        Raises:
            PermissionDenied: actor role may not mutate personnel records.
            ValidationError: future date or identical source and target office.
            ReferentialIntegrityError: officer, office or designation missing.
        """
        actor = self.check_actor(actor)
        self.check_effective_date(command.effective_date, "effective_date")
        self.check_choice(command.transfer_type, TransferEvent.TRANSFER_TYPES, "transfer_type")
        if command.from_office_id and command.from_office_id == command.to_office_id:
            raise ValidationError(
                "Source and target office must differ",
                code="same_office",
                office_id=command.to_office_id,
            )

        def handler(scope: TransactionScope) -> TransferEvent:
            officer = self.get_or_fail(Officer, command.officer_id, scope.using, lock=True)
            to_office = self.get_or_fail(Office, command.to_office_id, scope.using)
            from_office_id = command.from_office_id or officer.office_id
            from_office = (
                self.get_or_fail(Office, from_office_id, scope.using) if from_office_id else None
            )
            if from_office is not None and from_office.pk == to_office.pk:
                raise ValidationError(
                    "Officer is already posted to this office",
                    code="same_office",
                    office_id=to_office.pk,
                )
            to_designation = (
                self.get_or_fail(Designation, command.to_designation_id, scope.using)
                if command.to_designation_id
                else None
            )

            is_latest = not TransferEvent.objects.using(scope.using).filter(
                officer_id=officer.pk, transfer_date__gt=command.effective_date
            ).exists()
            event = self._insert_event(
                scope, actor, officer, command, from_office, to_office, to_designation
            )
            if is_latest:
                self._apply_current_state(scope, officer, to_office, to_designation)
            else:
                logger.info(
                    "Back-dated transfer %s recorded without changing current office",
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
        command: TransferCommand,
        from_office: Optional[Office],
        to_office: Office,
        to_designation: Optional[Designation],
    ) -> TransferEvent:
        event = TransferEvent(
            officer=officer,
            from_office=from_office,
            to_office=to_office,
            from_designation_id=officer.designation_id,
            to_designation=to_designation,
            transfer_date=command.effective_date,
            transfer_type=command.transfer_type,
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
        to_office: Office,
        to_designation: Optional[Designation],
    ) -> None:
        officer.office = to_office
        update_fields = ["office", "updated_at"]
        if to_designation is not None:
            officer.designation = to_designation
            update_fields.append("designation")
        officer.save(using=scope.using, update_fields=update_fields)

    def _log_activity(
        self, scope: TransactionScope, actor: Actor, officer: Officer, event: TransferEvent
    ) -> None:
        self.activity.log(
            actor,
            action="officer_transferred",
            target_type="officer",
            target_id=officer.pk,
            description=f"Transferred {officer.full_name} to office {event.to_office_id}",
            details={
                "transfer_id": event.pk,
                "from_office_id": event.from_office_id,
                "to_office_id": event.to_office_id,
                "to_designation_id": event.to_designation_id,
                "transfer_date": event.transfer_date.isoformat(),
                "transfer_type": event.transfer_type,
            },
            correlation_id=scope.correlation_id,
            using=scope.using,
        )


transfer_service = TransferService()
