from django.apps import AppConfig
import logging

log = logging.getLogger("apps.enqueue.apps")


class EnqueueConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.enqueue"
    label = "enqueue"
    verbose_name = "Enqueue"

    def ready(self):
        from . import checks  # noqa: F401  (registers system checks)
        log.info("EnqueueConfig ready.")
