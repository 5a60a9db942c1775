"""Domain exceptions for personnel-guard services."""

from __future__ import annotations

from typing import Any, Optional


class PersonnelGuardError(Exception):
    """Typed error carrying a stable code and optional context."""

    default_code = "error"

    def __init__(self, message: str, *, code: Optional[str] = None, **context: Any) -> None:
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.context = context

    def as_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


class PermissionDenied(PersonnelGuardError):
    """The actor lacks the tier or policy permission for an operation."""

    default_code = "permission_denied"


class ValidationError(PersonnelGuardError):
    """Input rejected before (or without) any write being applied."""

    default_code = "validation_error"


class QuotaExceeded(PersonnelGuardError):
    """Daily unmask request limit reached for an (actor, field) pair."""

    default_code = "quota_exceeded"


class SecondFactorError(PersonnelGuardError):
    """Missing, expired or mismatched second-factor code."""

    default_code = "second_factor_error"


class TransactionFailure(PersonnelGuardError):
    """A transaction was rolled back; ``original`` holds the cause."""

    default_code = "transaction_failure"

    def __init__(
        self,
        message: str,
        *,
        original: Optional[BaseException] = None,
        code: Optional[str] = None,
        **context: Any,
    ) -> None:
        super().__init__(message, code=code, **context)
        self.original = original


class ReferentialIntegrityError(TransactionFailure):
    """A referenced officer, office or designation does not exist."""

    default_code = "referential_integrity_error"


class AuditWriteError(PersonnelGuardError):
    """An audit record could not be persisted."""

    default_code = "audit_write_error"
