"""
Model registry for personnel_guard.

Imports the personnel and field security models so Django auto-discovery
registers them under the ``personnel_guard`` app label.
"""

from .personnel.models import (  # noqa: F401
    ActivityLogEntry,
    Designation,
    Office,
    Officer,
    PromotionEvent,
    TransferEvent,
)
from .security.models import (  # noqa: F401
    AuditReadRecord,
    FieldAccessPolicy,
    UnmaskRequest,
)
