"""
Transaction engine for multi-table state changes.

A handler runs inside ``transaction.atomic`` on one database alias while the
engine holds that alias's write lock, so at most one engine transaction per
alias is in flight in the process. Any exception rolls the whole unit back.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from django.db import IntegrityError, connections, transaction

from ..errors import PersonnelGuardError, ReferentialIntegrityError, TransactionFailure
from ..observability import capture_exception
from ..security.context import new_correlation_id

logger = logging.getLogger("personnel_guard.transactions")

T = TypeVar("T")

_write_locks: dict[str, threading.Lock] = {}
_write_locks_guard = threading.Lock()
_thread_state = threading.local()


def _write_lock(using: str) -> threading.Lock:
    with _write_locks_guard:
        lock = _write_locks.get(using)
        if lock is None:
            lock = _write_locks[using] = threading.Lock()
        return lock


def _active_aliases() -> set[str]:
    active = getattr(_thread_state, "active", None)
    if active is None:
        active = _thread_state.active = set()
    return active


@dataclass(frozen=True)
class TransactionScope:
    """Handle passed to transaction handlers."""

    using: str
    correlation_id: str
    operation_name: str


class TransactionEngine:
    """Runs handlers as single atomic units on one database alias."""

    def __init__(self, using: str = "default") -> None:
        self.using = using

    def in_transaction(self) -> bool:
        return self.using in _active_aliases()

    def with_transaction(
        self,
        handler: Callable[[TransactionScope], T],
        correlation_id: Optional[str] = None,
        operation_name: str = "transaction",
    ) -> T:
        """
        Execute ``handler`` atomically and return its result.

        Args:
            handler: Callable receiving a ``TransactionScope``.
            correlation_id: Id echoed in the BEGIN/COMMIT/ROLLBACK log lines;
                generated when omitted.
            operation_name: Label for log lines.

        Returns:
            Whatever ``handler`` returns, after commit.

        Raises:
            TransactionFailure: when called again from inside a handler on the
                same alias.
            ReferentialIntegrityError: when the database rejects a write with
                an integrity error.
            Exception: any other error raised by ``handler``, unchanged.
        """
        active = _active_aliases()
        if self.using in active:
            raise TransactionFailure(
                f"Nested engine transaction on '{self.using}' is not supported",
                code="nested_transaction",
                operation_name=operation_name,
            )

        scope = TransactionScope(
            using=self.using,
            correlation_id=correlation_id or new_correlation_id(),
            operation_name=operation_name,
        )

        with _write_lock(self.using):
            active.add(self.using)
            try:
                logger.info(
                    "[%s] Transaction BEGIN (%s)", scope.correlation_id, scope.operation_name
                )
                try:
                    with transaction.atomic(using=self.using):
                        result = handler(scope)
                except IntegrityError as exc:
                    self._rolled_back(scope, exc)
                    raise ReferentialIntegrityError(
                        "Write rejected by a database integrity constraint",
                        original=exc,
                        correlation_id=scope.correlation_id,
                    ) from exc
                except Exception as exc:
                    self._rolled_back(scope, exc)
                    raise
                logger.info(
                    "[%s] Transaction COMMIT (%s)", scope.correlation_id, scope.operation_name
                )
                return result
            finally:
                active.discard(self.using)

    def _rolled_back(self, scope: TransactionScope, error: BaseException) -> None:
        connection = connections[self.using]
        if connection.connection is None or connection.needs_rollback:
            logger.error(
                "[%s] Transaction ROLLBACK FAILED (%s): %s",
                scope.correlation_id,
                scope.operation_name,
                error,
            )
        else:
            logger.info(
                "[%s] Transaction ROLLBACK (%s): %s",
                scope.correlation_id,
                scope.operation_name,
                error,
            )
        if not isinstance(error, PersonnelGuardError):
            capture_exception(
                error,
                operation=scope.operation_name,
                correlation_id=scope.correlation_id,
            )


transaction_engine = TransactionEngine()
