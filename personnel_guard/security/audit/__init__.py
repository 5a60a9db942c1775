"""
Audit trail of sensitive field disclosures.
"""

from .recorder import AuditRecorder, audit_recorder
from .types import AccessType

__all__ = ["AccessType", "AuditRecorder", "audit_recorder"]
