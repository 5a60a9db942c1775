"""
Type definitions for field access auditing.
"""

from enum import Enum


class AccessType(str, Enum):
    """How a sensitive field value was disclosed."""

    VIEW = "view"
    VIEW_FULL = "view_full"
    UNMASK = "unmask"
