from __future__ import annotations

import logging

from . import conf
from .host import AssetQueue, bind_queue, reset_queue
from .signals import admin_enqueue_assets, public_enqueue_assets

logger = logging.getLogger("enqueue.host")


def is_admin_request(request) -> bool:
    return request.path.startswith(conf.admin_path_prefix())


def page_identifier(request) -> str:
    match = getattr(request, "resolver_match", None)
    if match is not None and match.view_name:
        return match.view_name
    return request.path


class AssetQueueMiddleware:
    """
    Gives every request its own AssetQueue and fires the enqueue signals once,
    right before the view runs (the resolved view name is the admin "screen").
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        queue = AssetQueue()
        request.asset_queue = queue
        token = bind_queue(queue)
        try:
            return self.get_response(request)
        finally:
            reset_queue(token)

    def process_view(self, request, view_func, view_args, view_kwargs):
        queue = getattr(request, "asset_queue", None)
        if queue is None or queue.fired:
            return None
        queue.fired = True
        if is_admin_request(request):
            page = page_identifier(request)
            logger.debug("enqueue_admin_pass page=%s", page)
            admin_enqueue_assets.send(sender=self.__class__, page=page, registry=queue)
        else:
            logger.debug("enqueue_public_pass path=%s", request.path)
            public_enqueue_assets.send(sender=self.__class__, registry=queue)
        return None
