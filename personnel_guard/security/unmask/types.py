"""
Type definitions for the unmask workflow.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class UnmaskStatus(str, Enum):
    """Lifecycle states of an unmask request; only PENDING is non-terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    EXPIRED = "expired"


@dataclass(frozen=True)
class UnmaskDecision:
    """
    Whether an actor may open a new unmask request for a field.

    Never carries the field value itself.
    """

    allowed: bool
    requires_second_factor: bool = True
    requires_approval: bool = True
    remaining_today: int = 0
    max_requests_per_day: int = 0
    reason: Optional[str] = None
    quota_exceeded: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UnmaskTicket:
    """
    Result of ``request_unmask``.

    ``code`` is set only when a second factor is required; it must be
    delivered to the requester out of band and is never logged.
    """

    request_id: str
    status: UnmaskStatus
    requires_second_factor: bool
    requires_approval: bool
    code: Optional[str] = field(default=None, repr=False)
    code_expires_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
