"""
URL configuration for the enqueuekit project.

The admin site is mounted under ENQUEUE_ADMIN_PATH_PREFIX so admin screens
receive the admin enqueue pass.
"""
from django.contrib import admin
from django.urls import path

from apps.enqueue import conf
from apps.enqueue.views import demo_page

urlpatterns = [
    path(conf.admin_path_prefix().strip("/") + "/", admin.site.urls),
    path("", demo_page, name="demo"),
]
