"""
AuditRecorder implementation.
"""

import json
import logging
from typing import Any, Callable, Mapping, Optional, Union

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import validate_ipv46_address
from django.db import DatabaseError, transaction
from django.utils import timezone

from ...config_proxy import get_setting
from ...errors import AuditWriteError
from ...observability import capture_exception
from ..context import Actor
from .types import AccessType

logger = logging.getLogger(__name__)


def _clean_ip(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        validate_ipv46_address(value)
    except DjangoValidationError:
        return None
    return value


def _officer_identity(officer: Any) -> tuple[str, str]:
    if isinstance(officer, Mapping):
        return str(officer.get("id") or ""), str(officer.get("full_name") or "")
    if hasattr(officer, "pk"):
        return str(officer.pk), str(getattr(officer, "full_name", "") or "")
    return str(officer or ""), ""


class AuditRecorder:
    """
    Append-only recorder of sensitive field disclosures.

    Each record is inserted inside its own savepoint so a failed insert does
    not poison an enclosing transaction. Database errors are retried
    ``audit_settings.write_retries`` times before ``AuditWriteError`` is
    raised to the caller.
    """

    def __init__(
        self,
        using: Optional[str] = None,
        retries: Optional[int] = None,
        clock: Callable[[], Any] = timezone.now,
    ) -> None:
        self._using = using
        self._retries = retries
        self.clock = clock
        self.logger = logging.getLogger("audit")

    @property
    def using(self) -> str:
        return self._using or get_setting("audit_settings.database", "default")

    @property
    def retries(self) -> int:
        if self._retries is not None:
            return self._retries
        return int(get_setting("audit_settings.write_retries", 2))

    @property
    def enabled(self) -> bool:
        return bool(get_setting("audit_settings.enabled", True))

    def _insert(self, values: dict[str, Any], using: Optional[str] = None) -> int:
        from ..models import AuditReadRecord

        using = using or self.using
        with transaction.atomic(using=using):
            row = AuditReadRecord(**values)
            row.save(using=using)
        return row.pk

    def record(
        self,
        actor: Optional[Actor],
        officer: Union[Mapping[str, Any], Any],
        field_name: str,
        masked_value: Optional[str],
        access_type: Union[AccessType, str],
        correlation_id: Optional[str] = None,
        access_reason: str = "",
        mfa_verified: bool = False,
        using: Optional[str] = None,
    ) -> Optional[int]:
        """
        Persist one disclosure of ``field_name``.

        Args:
            actor: Viewer the value was disclosed to.
            officer: Officer instance, record mapping or officer id.
            field_name: Disclosed field.
            masked_value: Masked form of the value; the raw value is never stored.
            access_type: ``view``, ``view_full`` or ``unmask``.
            correlation_id: Request correlation id.
            using: Database alias overriding ``audit_settings.database``; used
                to keep the row inside a caller's transaction.

        Returns:
            The new record id, or None when auditing is disabled.

        Raises:
            AuditWriteError: when the insert keeps failing after retries.
        """
        if not self.enabled:
            return None

        access = AccessType(access_type)
        officer_id, officer_name = _officer_identity(officer)
        values = {
            "user_id": getattr(actor, "user_id", None),
            "user_role": getattr(actor, "role_name", "") or "",
            "user_name": (getattr(actor, "username", None) or "")[:150],
            "officer_id": officer_id,
            "officer_name": officer_name[:200],
            "field_name": field_name,
            "field_value_masked": masked_value[:255] if masked_value else masked_value,
            "access_type": access.value,
            "access_reason": access_reason or "",
            "ip_address": _clean_ip(getattr(actor, "client_ip", None)),
            "user_agent": getattr(actor, "user_agent", None) or "",
            "request_id": correlation_id or "",
            "mfa_verified": bool(mfa_verified),
            "created_at": self.clock(),
        }

        last_error: Optional[DatabaseError] = None
        for attempt in range(self.retries + 1):
            try:
                record_id = self._insert(values, using=using)
            except DatabaseError as exc:
                last_error = exc
                logger.warning(
                    "Audit write attempt %s/%s failed for %s.%s: %s",
                    attempt + 1,
                    self.retries + 1,
                    officer_id,
                    field_name,
                    exc,
                )
                continue
            self.logger.info(
                json.dumps(
                    {
                        "event": "field_access",
                        "access_type": access.value,
                        "user_id": values["user_id"],
                        "officer_id": officer_id,
                        "field_name": field_name,
                        "request_id": values["request_id"],
                        "timestamp": values["created_at"],
                    },
                    cls=DjangoJSONEncoder,
                )
            )
            return record_id

        logger.error(
            "Audit record for %s.%s could not be written: %s",
            officer_id,
            field_name,
            last_error,
        )
        capture_exception(last_error, operation="audit_write", correlation_id=correlation_id)
        raise AuditWriteError(
            "Audit record could not be written",
            officer_id=officer_id,
            field_name=field_name,
        ) from last_error


audit_recorder = AuditRecorder()
