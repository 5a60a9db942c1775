from dataclasses import dataclass
from typing import Any, Optional
from uuid import uuid4

from django.http import HttpRequest

from .roles import AccessTier, Role, normalize_role, tier_for_role


@dataclass(frozen=True)
class Actor:
    """The authenticated entity a request is evaluated for."""
    user_id: Optional[int]
    role: str
    username: Optional[str] = None
    client_ip: Optional[str] = None
    user_agent: Optional[str] = None

    @property
    def role_name(self) -> str:
        role = normalize_role(self.role)
        return role.value if role else str(self.role or "").strip().lower()

    @property
    def tier(self) -> AccessTier:
        return tier_for_role(self.role)

    @property
    def is_admin(self) -> bool:
        return normalize_role(self.role) == Role.ADMIN

    @classmethod
    def from_user(cls, user: Any, **extra: Any) -> Optional["Actor"]:
        """Build an actor from an authenticated user; None for anonymous users."""
        if user is None or not getattr(user, "is_authenticated", False):
            return None
        role = getattr(user, "role", None)
        if not role and getattr(user, "is_superuser", False):
            role = Role.ADMIN.value
        return cls(
            user_id=getattr(user, "pk", None),
            role=str(role or Role.USER.value),
            username=user.get_username() if hasattr(user, "get_username") else getattr(user, "username", None),
            **extra,
        )

    @classmethod
    def from_request(cls, request: HttpRequest) -> Optional["Actor"]:
        return cls.from_user(
            getattr(request, "user", None),
            client_ip=get_client_ip(request),
            user_agent=request.META.get("HTTP_USER_AGENT", "unknown")[:500],
        )


def new_correlation_id() -> str:
    return uuid4().hex


def get_correlation_id(request: Optional[HttpRequest] = None) -> str:
    """Reuse the caller's X-Correlation-ID header when present."""
    if request is not None:
        header = request.META.get("HTTP_X_CORRELATION_ID")
        if header:
            return header[:64]
    return new_correlation_id()


def get_client_ip(request: HttpRequest) -> str:
    """Extract client IP from request headers."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.META.get("HTTP_X_REAL_IP")
    if real_ip:
        return real_ip
    return request.META.get("REMOTE_ADDR", "unknown")
