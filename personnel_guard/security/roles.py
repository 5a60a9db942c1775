"""
Roles, capability tiers and visibility levels.

Every role check in the library goes through ``ROLE_TIERS``: a role that is
not listed (including a misspelled one) resolves to the tier of a plain
authenticated user and can never reach the restricted or private tiers.
"""

import logging
from enum import Enum, IntEnum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Roles known to the library."""

    ADMIN = "admin"
    HR = "hr"
    MANAGER = "manager"
    USER = "user"


class AccessTier(IntEnum):
    """Capability tiers; each tier includes every lower one."""

    PUBLIC = 0
    INTERNAL = 1
    RESTRICTED = 2
    PRIVATE = 3


class VisibilityLevel(str, Enum):
    """Visibility level declared on a field group of a record."""

    PUBLIC = "public"
    INTERNAL = "internal"
    RESTRICTED = "restricted"
    PRIVATE = "private"

    @property
    def required_tier(self) -> AccessTier:
        return _LEVEL_TIERS[self]

    @classmethod
    def parse(cls, value: Union["VisibilityLevel", str, None]) -> "VisibilityLevel":
        """Parse a stored level; unknown values map to ``PRIVATE``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            logger.warning("Unknown visibility level %r treated as private", value)
            return cls.PRIVATE


_LEVEL_TIERS = {
    VisibilityLevel.PUBLIC: AccessTier.PUBLIC,
    VisibilityLevel.INTERNAL: AccessTier.INTERNAL,
    VisibilityLevel.RESTRICTED: AccessTier.RESTRICTED,
    VisibilityLevel.PRIVATE: AccessTier.PRIVATE,
}

ROLE_TIERS: dict[Role, AccessTier] = {
    Role.ADMIN: AccessTier.PRIVATE,
    Role.HR: AccessTier.RESTRICTED,
    Role.MANAGER: AccessTier.RESTRICTED,
    Role.USER: AccessTier.INTERNAL,
}


def normalize_role(value: Union[Role, str, None]) -> Optional[Role]:
    """Return the ``Role`` for a raw role value, or None when unknown."""
    if value is None:
        return None
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        return None


def tier_for_role(value: Union[Role, str, None]) -> AccessTier:
    """
    Map an authenticated actor's role to its capability tier.

    Args:
        value: Role enum member or raw role string.

    Returns:
        The tier from ``ROLE_TIERS``; unknown roles get ``INTERNAL``.
    """
    role = normalize_role(value)
    if role is None:
        if value:
            logger.warning("Unknown role %r resolved to the internal tier", value)
        return AccessTier.INTERNAL
    return ROLE_TIERS[role]


def role_in(value: Union[Role, str, None], allowed: list[str]) -> bool:
    """Check a raw role against a configured list of role names."""
    role = normalize_role(value)
    if role is None:
        return False
    return role.value in {str(name).strip().lower() for name in allowed}
