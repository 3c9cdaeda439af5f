# enqueuekit/settings/test.py
from .base import *  # noqa: F401,F403

DEBUG = False
ALLOWED_HOSTS = ["testserver"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Deterministic versions: debug follows the per-manager config only
ENQUEUE_SCRIPT_DEBUG = False
ENQUEUE_DEFAULT_VERSION = "1.0.0"

LOG_LEVEL = "WARNING"
LOGGING["loggers"]["enqueue"]["level"] = "WARNING"
