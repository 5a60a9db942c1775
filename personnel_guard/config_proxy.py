"""
Configuration management for personnel-guard.

Settings are resolved in the following order:
1. Project settings (``settings.PERSONNEL_GUARD``)
2. Library defaults (``LIBRARY_DEFAULTS``)
"""

from typing import Any, Optional

from django.conf import settings
from django.core.signals import setting_changed
from django.dispatch import receiver

from .defaults import LIBRARY_DEFAULTS

SETTINGS_NAME = "PERSONNEL_GUARD"


class SettingsProxy:
    """
    Proxy for accessing personnel-guard settings with dotted keys.

    Example:
        >>> proxy = SettingsProxy()
        >>> proxy.get("unmask_settings.code_ttl_seconds")
        300
    """

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution and caching.

        Args:
            key: Dotted setting key, e.g. ``"audit_settings.write_retries"``
            default: Value returned when neither source defines the key

        Returns:
            The setting value from the highest priority source
        """
        if key in self._cache:
            return self._cache[key]

        value = self._get_django_setting(key)
        if value is None:
            value = self._get_nested_value(LIBRARY_DEFAULTS, key)
        if value is None:
            value = default

        self._cache[key] = value
        return value

    def _get_django_setting(self, key: str) -> Any:
        return self._get_nested_value(getattr(settings, SETTINGS_NAME, {}) or {}, key)

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Args:
            data: Dictionary to search in
            key: Key to retrieve (supports dot notation for nested access)

        Returns:
            The value or None if not found
        """
        if not isinstance(data, dict):
            return None

        current: Any = data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def clear_cache(self) -> None:
        """Clear the settings cache."""
        self._cache.clear()


# Global settings proxy instance
settings_proxy = SettingsProxy()


def get_setting(key: str, default: Any = None) -> Any:
    """Shortcut for ``settings_proxy.get``."""
    return settings_proxy.get(key, default)


def get_section(section: str) -> dict[str, Any]:
    """
    Return a settings section with project values merged over defaults.

    Args:
        section: Top-level section name, e.g. ``"unmask_settings"``

    Returns:
        A new dictionary; mutating it does not affect the settings.
    """
    merged = dict(LIBRARY_DEFAULTS.get(section, {}))
    project_section: Optional[dict[str, Any]] = (
        getattr(settings, SETTINGS_NAME, {}) or {}
    ).get(section)
    if isinstance(project_section, dict):
        merged.update(project_section)
    return merged


@receiver(setting_changed)
def _reset_settings_cache(sender, setting, **kwargs):
    if setting == SETTINGS_NAME:
        settings_proxy.clear_cache()
