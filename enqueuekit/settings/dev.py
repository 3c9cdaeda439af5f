# enqueuekit/settings/dev.py
# export DJANGO_SETTINGS_MODULE=enqueuekit.settings.dev

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['127.0.0.1', 'localhost', 'testserver']

LOGGING['loggers'].update({
    "enqueue": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
    "enqueue.host": {"handlers": ["console"], "level": "DEBUG", "propagate": False},
})
