"""
Base settings for projects using personnel-guard.
Users import * from this file in their project's settings.py.
"""

import copy
import os
from pathlib import Path

from personnel_guard.defaults import LIBRARY_DEFAULTS

# This BASE_DIR is a placeholder; the project's settings.py will redefine it
# relative to itself, but we provide a stable fallback here.
BASE_DIR = Path(__file__).resolve().parents[2]

# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = os.environ.get(
    "DJANGO_SECRET_KEY", "django-insecure-personnel-guard-default-key-change-me"
)

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = os.environ.get("DJANGO_DEBUG", "False").lower() == "true"


def _split_env_list(raw_value: str) -> list[str]:
    if not raw_value:
        return []
    return [item.strip() for item in raw_value.split(",") if item.strip()]


ALLOWED_HOSTS = _split_env_list(
    os.environ.get("DJANGO_ALLOWED_HOSTS", "localhost,127.0.0.1")
)

INSTALLED_APPS = [
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "personnel_guard",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{asctime} {levelname} {name} {message}",
            "style": "{",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "personnel_guard": {
            "handlers": ["console"],
            "level": os.environ.get("PERSONNEL_GUARD_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
        "audit": {
            "handlers": ["console"],
            "level": "INFO",
            "propagate": False,
        },
    },
}

# Load library defaults into Django settings
PERSONNEL_GUARD = copy.deepcopy(LIBRARY_DEFAULTS)

if os.environ.get("PERSONNEL_GUARD_AUDIT_DATABASE"):
    PERSONNEL_GUARD["audit_settings"]["database"] = os.environ["PERSONNEL_GUARD_AUDIT_DATABASE"]

if os.environ.get("PERSONNEL_GUARD_CAPTURE_EXCEPTIONS", "").lower() == "true":
    PERSONNEL_GUARD["observability_settings"]["capture_exceptions"] = True
