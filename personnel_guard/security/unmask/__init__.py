"""
Controlled disclosure of masked field values.
"""

from .manager import UNMASKABLE_FIELDS, UnmaskService, unmask_service
from .types import UnmaskDecision, UnmaskStatus, UnmaskTicket

__all__ = [
    "UNMASKABLE_FIELDS",
    "UnmaskDecision",
    "UnmaskService",
    "UnmaskStatus",
    "UnmaskTicket",
    "unmask_service",
]
