"""Runtime accessors for the ENQUEUE_* settings."""

from __future__ import annotations

import time

from django.conf import settings

DEFAULT_VERSION = "1.0.0"
DEFAULT_ADMIN_PREFIX = "/admin/"
DEFAULT_ASSETS_DIR = "assets"


def script_debug() -> bool:
    raw = getattr(settings, "ENQUEUE_SCRIPT_DEBUG", None)
    if raw is None:
        return bool(getattr(settings, "DEBUG", False))
    return bool(raw)


def default_version() -> str:
    raw = getattr(settings, "ENQUEUE_DEFAULT_VERSION", DEFAULT_VERSION)
    value = str(raw or "").strip()
    return value or DEFAULT_VERSION


def debug_version() -> str:
    """Fresh cache-busting token used while debugging."""
    return str(int(time.time()))


def admin_path_prefix() -> str:
    raw = getattr(settings, "ENQUEUE_ADMIN_PATH_PREFIX", DEFAULT_ADMIN_PREFIX)
    value = str(raw or "").strip()
    return value or DEFAULT_ADMIN_PREFIX


def assets_dir() -> str:
    raw = getattr(settings, "ENQUEUE_ASSETS_DIR", DEFAULT_ASSETS_DIR)
    return str(raw or "").strip("/")


def static_url() -> str:
    return str(getattr(settings, "STATIC_URL", None) or "/static/")
