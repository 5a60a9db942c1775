from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class TransferCommand:
    """DTO for transferring an officer to another office"""
    officer_id: str
    to_office_id: str
    effective_date: date
    from_office_id: Optional[str] = None  # Defaults to the officer's current office
    to_designation_id: Optional[str] = None
    transfer_type: str = "routine"
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    reason: Optional[str] = None
    remarks: Optional[str] = None


@dataclass
class PromotionCommand:
    """DTO for promoting an officer to a higher designation"""
    officer_id: str
    to_designation_id: str
    effective_date: date
    from_designation_id: Optional[str] = None  # Defaults to the officer's current designation
    from_grade: Optional[int] = None
    to_grade: Optional[int] = None
    to_scale: Optional[str] = None
    to_basic_salary: Optional[Decimal] = None
    promotion_type: str = "regular"
    order_number: Optional[str] = None
    order_date: Optional[date] = None
    reason: Optional[str] = None
    remarks: Optional[str] = None
