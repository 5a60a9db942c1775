from .framework_settings import *  # noqa: F403

ENVIRONMENT = "testing"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

MIGRATION_MODULES = {"personnel_guard": None}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOGGING = dict(LOGGING)  # noqa: F405
LOGGING["loggers"] = {
    name: {**config, "propagate": True}
    for name, config in LOGGING["loggers"].items()
}
