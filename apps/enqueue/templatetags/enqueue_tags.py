"""
Usage (base template)::

    {% load enqueue_tags %}
    <head>{% enqueued_styles %}{% enqueued_scripts footer=False %}</head>
    <body>... {% enqueued_scripts %}</body>
"""

from __future__ import annotations

from django import template

from ..host import current_queue

register = template.Library()


def _queue_for(context):
    request = context.get("request")
    queue = getattr(request, "asset_queue", None)
    return queue if queue is not None else current_queue()


@register.simple_tag(takes_context=True)
def enqueued_styles(context):
    queue = _queue_for(context)
    if queue is None:
        return ""
    return queue.render_styles()


@register.simple_tag(takes_context=True)
def enqueued_scripts(context, footer=True):
    queue = _queue_for(context)
    if queue is None:
        return ""
    return queue.render_scripts(footer=footer)
