"""
Activity log writer.
"""

import logging
from typing import Any, Optional

from ...security.context import Actor
from ..models import ActivityLogEntry

logger = logging.getLogger(__name__)


class ActivityLogger:
    """Appends ActivityLogEntry rows; callers own the surrounding transaction."""

    def log(
        self,
        actor: Optional[Actor],
        action: str,
        target_type: str,
        target_id: str,
        description: str = "",
        details: Optional[dict[str, Any]] = None,
        correlation_id: str = "",
        using: str = "default",
    ) -> ActivityLogEntry:
        entry = ActivityLogEntry(
            actor_id=getattr(actor, "user_id", None),
            actor_username=(getattr(actor, "username", None) or "")[:150],
            action=action,
            target_type=target_type,
            target_id=str(target_id),
            description=description,
            details=details or {},
            correlation_id=correlation_id or "",
        )
        entry.save(using=using)
        logger.debug("Activity %s on %s:%s", action, target_type, target_id)
        return entry


activity_logger = ActivityLogger()
