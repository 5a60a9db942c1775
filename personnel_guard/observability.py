"""
Sentry error capture for rollbacks and audit write failures.

Active only when ``observability_settings.capture_exceptions`` is enabled.
The SDK must be initialised by the host project (``sentry_sdk.init``).
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk

from .config_proxy import get_setting

logger = logging.getLogger(__name__)


def capture_enabled() -> bool:
    return bool(get_setting("observability_settings.capture_exceptions", False))


def capture_exception(error: BaseException, **tags: Any) -> None:
    """Send ``error`` to Sentry with ``tags`` set on a fresh scope."""
    if not capture_enabled():
        return
    try:
        with sentry_sdk.new_scope() as scope:
            for key, value in tags.items():
                if value is not None:
                    scope.set_tag(f"personnel_guard.{key}", str(value))
            sentry_sdk.capture_exception(error)
    except Exception as exc:
        logger.warning("Sentry capture failed: %s", exc)
