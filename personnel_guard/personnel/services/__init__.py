"""
State-transition use cases for officer records.

Each use case runs its writes inside one TransactionEngine call.
"""

from .activity import ActivityLogger, activity_logger
from .base import StateTransitionService
from .promotion_service import PromotionService, promotion_service
from .transfer_service import TransferService, transfer_service

__all__ = [
    "ActivityLogger",
    "activity_logger",
    "StateTransitionService",
    "PromotionService",
    "promotion_service",
    "TransferService",
    "transfer_service",
]
