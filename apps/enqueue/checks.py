from __future__ import annotations
from django.conf import settings
from django.core.checks import register, Warning

from . import conf

MIDDLEWARE_PATH = "apps.enqueue.middleware.AssetQueueMiddleware"


@register()
def middleware_installed_check(app_configs, **kwargs):
    # Without the middleware no enqueue signal is ever sent
    if MIDDLEWARE_PATH not in list(getattr(settings, "MIDDLEWARE", []) or []):
        return [Warning(
            "AssetQueueMiddleware is not installed; registered assets will never be enqueued.",
            hint=f"Add '{MIDDLEWARE_PATH}' to MIDDLEWARE.",
            id="enqueue.W001",
        )]
    return []


@register()
def admin_prefix_check(app_configs, **kwargs):
    prefix = conf.admin_path_prefix()
    if not prefix.startswith("/"):
        return [Warning(
            f"ENQUEUE_ADMIN_PATH_PREFIX must be an absolute path, got {prefix!r}.",
            hint="Use something like '/admin/'.",
            id="enqueue.W002",
        )]
    return []
