"""
Per-request asset queue: the registry managers enqueue into.

One ``AssetQueue`` is created for every request by ``AssetQueueMiddleware`` and
bound to the running context, so code without access to the request (an
``AssetManager`` configured at import time, for instance) can reach it through
``RequestRegistry``. Template tags render the queue as ``<link>``/``<script>``
markup at the end of the request.
"""

from __future__ import annotations

import json
import logging
import re
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from django.core.serializers.json import DjangoJSONEncoder
from django.utils.html import format_html
from django.utils.safestring import SafeString, mark_safe

logger = logging.getLogger("enqueue.host")

TagFilter = Callable[[str, str], str]

_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

# Same escapes as django.utils.html.json_script
_JSON_ESCAPES = {
    ord(">"): "\\u003E",
    ord("<"): "\\u003C",
    ord("&"): "\\u0026",
}

INLINE_POSITIONS = ("before", "after")


class AssetRegistry(Protocol):
    def enqueue_script(
        self, handle: str, src: str, deps: Sequence[str], version: str, in_footer: bool
    ) -> None: ...

    def enqueue_style(
        self, handle: str, src: str, deps: Sequence[str], version: str, media: str
    ) -> None: ...

    def localize_script(self, handle: str, name: str, data: Mapping[str, Any]) -> None: ...

    def add_inline_script(self, handle: str, data: str, position: str = "after") -> None: ...

    def add_inline_style(self, handle: str, data: str) -> None: ...

    def add_tag_filter(self, tag_filter: TagFilter) -> None: ...


@dataclass
class QueuedScript:
    handle: str
    src: str
    deps: List[str]
    version: str
    in_footer: bool


@dataclass
class QueuedStyle:
    handle: str
    src: str
    deps: List[str]
    version: str
    media: str


@dataclass
class AssetQueue:
    """Scripts and styles enqueued for the current request, plus their extras."""

    scripts: Dict[str, QueuedScript] = field(default_factory=dict)
    styles: Dict[str, QueuedStyle] = field(default_factory=dict)
    localizations: Dict[str, List[tuple]] = field(default_factory=dict)
    inline_scripts: Dict[str, Dict[str, List[str]]] = field(default_factory=dict)
    inline_styles: Dict[str, List[str]] = field(default_factory=dict)
    tag_filters: List[TagFilter] = field(default_factory=list)
    fired: bool = False

    # ---------------------------
    # Registry API
    # ---------------------------
    def enqueue_script(
        self, handle: str, src: str, deps: Sequence[str], version: str, in_footer: bool
    ) -> None:
        self.scripts[handle] = QueuedScript(handle, src, list(deps or []), str(version or ""), bool(in_footer))

    def enqueue_style(
        self, handle: str, src: str, deps: Sequence[str], version: str, media: str
    ) -> None:
        self.styles[handle] = QueuedStyle(handle, src, list(deps or []), str(version or ""), media or "all")

    def localize_script(self, handle: str, name: str, data: Mapping[str, Any]) -> None:
        if not _JS_IDENTIFIER.match(name or ""):
            logger.warning("enqueue_localize_invalid_name handle=%s name=%r", handle, name)
            return
        self.localizations.setdefault(handle, []).append((name, dict(data or {})))

    def add_inline_script(self, handle: str, data: str, position: str = "after") -> None:
        slot = position if position in INLINE_POSITIONS else "after"
        blocks = self.inline_scripts.setdefault(handle, {"before": [], "after": []})
        blocks[slot].append(data)

    def add_inline_style(self, handle: str, data: str) -> None:
        self.inline_styles.setdefault(handle, []).append(data)

    def add_tag_filter(self, tag_filter: TagFilter) -> None:
        self.tag_filters.append(tag_filter)

    # ---------------------------
    # Markup
    # ---------------------------
    def is_enqueued(self, handle: str, kind: str = "script") -> bool:
        return handle in (self.scripts if kind == "script" else self.styles)

    def apply_tag_filters(self, tag: str, handle: str) -> str:
        for tag_filter in self.tag_filters:
            tag = tag_filter(tag, handle)
        return tag

    def render_styles(self) -> SafeString:
        parts: List[str] = []
        for style in _dependency_order(self.styles):
            parts.append(format_html(
                '<link rel="stylesheet" id="{}-css" href="{}" media="{}">',
                style.handle,
                versioned_url(style.src, style.version),
                style.media,
            ))
            for css in self.inline_styles.get(style.handle, []):
                parts.append(format_html('<style id="{}-inline-css">{}</style>', style.handle, mark_safe(css)))
        return mark_safe("\n".join(parts))

    def render_scripts(self, footer: Optional[bool] = None) -> SafeString:
        """Render queued scripts; ``footer`` selects head (False), footer (True) or all (None)."""
        parts: List[str] = []
        for script in _dependency_order(self.scripts):
            if footer is not None and script.in_footer != footer:
                continue
            parts.extend(self._script_markup(script))
        return mark_safe("\n".join(parts))

    def _script_markup(self, script: QueuedScript) -> Iterable[str]:
        for name, data in self.localizations.get(script.handle, []):
            payload = json.dumps(data, cls=DjangoJSONEncoder).translate(_JSON_ESCAPES)
            yield format_html('<script id="{}-js-extra">var {} = {};</script>', script.handle, name, mark_safe(payload))
        blocks = self.inline_scripts.get(script.handle, {})
        for code in blocks.get("before", []):
            yield format_html('<script id="{}-js-before">{}</script>', script.handle, mark_safe(code))
        tag = format_html(
            '<script src="{}" id="{}-js"></script>',
            versioned_url(script.src, script.version),
            script.handle,
        )
        yield self.apply_tag_filters(str(tag), script.handle)
        for code in blocks.get("after", []):
            yield format_html('<script id="{}-js-after">{}</script>', script.handle, mark_safe(code))


def versioned_url(src: str, version: str) -> str:
    if not version:
        return src
    sep = "&" if "?" in src else "?"
    return f"{src}{sep}ver={version}"


def _dependency_order(items: Dict[str, Any]) -> List[Any]:
    """Queued items with their queued dependencies first; unknown deps are ignored."""
    ordered: List[Any] = []
    done: set[str] = set()
    visiting: set[str] = set()

    def visit(handle: str) -> None:
        if handle in done:
            return
        if handle in visiting:
            logger.warning("enqueue_dependency_cycle handle=%s", handle)
            return
        visiting.add(handle)
        item = items[handle]
        for dep in item.deps:
            if dep in items:
                visit(dep)
        visiting.discard(handle)
        done.add(handle)
        ordered.append(item)

    for handle in items:
        visit(handle)
    return ordered


# ==========================================================
# Request binding
# ==========================================================
_current_queue: ContextVar[Optional[AssetQueue]] = ContextVar("enqueue_current_queue", default=None)


def bind_queue(queue: AssetQueue) -> Token:
    return _current_queue.set(queue)


def reset_queue(token: Token) -> None:
    _current_queue.reset(token)


def current_queue() -> Optional[AssetQueue]:
    return _current_queue.get()


class RequestRegistry:
    """Registry forwarding every call to the queue bound to the running request."""

    def _queue(self, operation: str, handle: str) -> Optional[AssetQueue]:
        queue = current_queue()
        if queue is None:
            logger.debug("enqueue_no_request op=%s handle=%s", operation, handle)
        return queue

    def enqueue_script(self, handle, src, deps, version, in_footer) -> None:
        queue = self._queue("enqueue_script", handle)
        if queue is not None:
            queue.enqueue_script(handle, src, deps, version, in_footer)

    def enqueue_style(self, handle, src, deps, version, media) -> None:
        queue = self._queue("enqueue_style", handle)
        if queue is not None:
            queue.enqueue_style(handle, src, deps, version, media)

    def localize_script(self, handle, name, data) -> None:
        queue = self._queue("localize_script", handle)
        if queue is not None:
            queue.localize_script(handle, name, data)

    def add_inline_script(self, handle, data, position="after") -> None:
        queue = self._queue("add_inline_script", handle)
        if queue is not None:
            queue.add_inline_script(handle, data, position)

    def add_inline_style(self, handle, data) -> None:
        queue = self._queue("add_inline_style", handle)
        if queue is not None:
            queue.add_inline_style(handle, data)

    def add_tag_filter(self, tag_filter: TagFilter) -> None:
        queue = self._queue("add_tag_filter", "")
        if queue is not None:
            queue.add_tag_filter(tag_filter)


request_registry = RequestRegistry()
