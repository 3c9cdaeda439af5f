# apps/enqueue/manager.py
"""
Asset manager: declare scripts and styles once, enqueue them per request.

Features:
- relative sources resolved against the base URL + assets directory
- ``.min`` filename rewrite when minifying (ignored in debug mode)
- content-hash versions when a descriptor has no explicit version
- admin/public scope, admin screen filters and late-bound conditions
- script localization, inline code and async/defer tags

A manager does nothing until ``attach()`` connects it to the enqueue signals
fired by ``AssetQueueMiddleware``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from . import conf, paths
from .collection import AssetCollection
from .descriptors import (
    Asset,
    AssetKind,
    AssetScope,
    Localization,
    ScriptAsset,
    StyleAsset,
    kind_for_source,
)
from .errors import ASSET_ERROR, AssetError, InvalidBaseFileError
from .host import AssetRegistry, request_registry
from .signals import admin_enqueue_assets, public_enqueue_assets

logger = logging.getLogger("enqueue")

_SCREEN_TYPES = (list, tuple, set, frozenset)


@dataclass
class AssetConfig:
    file: str
    url: str
    path: str
    version: str
    debug: bool
    minify: bool = False
    scope: AssetScope = AssetScope.BOTH
    screens: List[str] = field(default_factory=list)
    assets_url: str = conf.DEFAULT_ASSETS_DIR
    script_deps: List[str] = field(default_factory=list)
    style_deps: List[str] = field(default_factory=list)
    in_footer: bool = True
    media: str = "all"

    @classmethod
    def build(cls, file: str, overrides: Optional[Mapping[str, Any]] = None) -> "AssetConfig":
        """Merge ``overrides`` onto the defaults derived from ``file`` and settings."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in dict(overrides or {}).items() if k in known}

        debug = bool(values.get("debug", conf.script_debug()))
        merged: dict = {
            "file": file,
            "url": paths.base_url_of(file),
            "path": paths.base_path_of(file),
            "version": conf.debug_version() if debug else conf.default_version(),
            "debug": debug,
            "assets_url": conf.assets_dir(),
        }
        merged.update(values)
        merged["debug"] = debug
        merged["version"] = str(merged["version"] or "")
        merged["scope"] = AssetScope.coerce(merged.get("scope") or AssetScope.BOTH)
        merged["assets_url"] = str(merged["assets_url"] or "").strip("/")
        for key in ("screens", "script_deps", "style_deps"):
            merged[key] = list(merged.get(key) or [])
        return cls(**merged)


@dataclass
class RegistrationReport:
    """Outcome of one bulk ``register()`` call."""

    registered: List[str] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failed: List[Tuple[str, AssetError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def first_error(self) -> Optional[AssetError]:
        return self.failed[0][1] if self.failed else None


class AssetManager:
    """Register and manage scripts and styles with optional conditional loading."""

    def __init__(
        self,
        file: str,
        config: Optional[Mapping[str, Any]] = None,
        *,
        registry: Optional[AssetRegistry] = None,
    ) -> None:
        if not paths.path_exists(file):
            raise InvalidBaseFileError(file)

        self.config = AssetConfig.build(file, config)
        self.registry: AssetRegistry = registry if registry is not None else request_registry
        self._scripts: AssetCollection[ScriptAsset] = AssetCollection()
        self._styles: AssetCollection[StyleAsset] = AssetCollection()
        self.last_registration = RegistrationReport()

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return (
            f"<AssetManager file={self.config.file!r} "
            f"scripts={self._scripts.count()} styles={self._styles.count()}>"
        )

    @property
    def scripts(self) -> AssetCollection[ScriptAsset]:
        return self._scripts

    @property
    def styles(self) -> AssetCollection[StyleAsset]:
        return self._styles

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def _dispatch_uid(self, context: str) -> str:
        return f"enqueue-{context}-{id(self)}"

    def attach(self) -> "AssetManager":
        """Connect to the admin/public enqueue signals (idempotent)."""
        admin_enqueue_assets.connect(self._on_admin_signal, weak=False, dispatch_uid=self._dispatch_uid("admin"))
        public_enqueue_assets.connect(self._on_public_signal, weak=False, dispatch_uid=self._dispatch_uid("public"))
        return self

    def detach(self) -> "AssetManager":
        admin_enqueue_assets.disconnect(dispatch_uid=self._dispatch_uid("admin"))
        public_enqueue_assets.disconnect(dispatch_uid=self._dispatch_uid("public"))
        return self

    def _on_admin_signal(self, sender, page: str = "", registry: Optional[AssetRegistry] = None, **kwargs) -> None:
        self.enqueue_admin(page, registry)

    def _on_public_signal(self, sender, registry: Optional[AssetRegistry] = None, **kwargs) -> None:
        self.enqueue_public(registry)

    # ---------------------------
    # Configuration
    # ---------------------------
    def set_assets_directory(self, directory: str) -> "AssetManager":
        self.config.assets_url = str(directory or "").strip("/")
        return self

    def set_debug(self, debug: bool) -> "AssetManager":
        self.config.debug = bool(debug)
        if self.config.debug:
            self.config.version = conf.debug_version()
        return self

    def set_minify(self, minify: bool) -> "AssetManager":
        self.config.minify = bool(minify)
        return self

    def is_debug(self) -> bool:
        return self.config.debug

    # ---------------------------
    # Registration
    # ---------------------------
    def _error(self, message: str, **data: Any) -> AssetError:
        logger.debug("enqueue_invalid_asset message=%s data=%s", message, data)
        return AssetError(ASSET_ERROR, message, data)

    def _validate(self, handle: str, src: str, options: Mapping[str, Any]) -> Optional[AssetError]:
        if not handle:
            return self._error("Asset handle is required")
        if not src:
            return self._error("Asset source is required", handle=handle)
        screens = options.get("screens")
        if screens and not isinstance(screens, _SCREEN_TYPES):
            return self._error("Screens must be an array", handle=handle)
        deps = options.get("deps")
        if deps and not isinstance(deps, _SCREEN_TYPES):
            return self._error("Dependencies must be an array", handle=handle)
        scope = options.get("scope")
        if scope is not None:
            try:
                AssetScope.coerce(scope)
            except ValueError:
                return self._error(f"Unknown scope: {scope!r}", handle=handle)
        localize = options.get("localize")
        if localize and not isinstance(localize, Localization):
            if not isinstance(localize, Mapping) or not localize.get("name"):
                return self._error("Localize must define a name", handle=handle)
            data = localize.get("data")
            if data is not None and not isinstance(data, Mapping):
                return self._error("Localize data must be an object", handle=handle)
        return None

    def _merge(self, defaults: dict, options: Mapping[str, Any]) -> dict:
        args = dict(defaults)
        for key, value in options.items():
            # "async" is a keyword, descriptors store it as async_
            name = "async_" if key == "async" else key
            if name in args:
                args[name] = value
        return args

    def _version_for(self, src: str, version: Any) -> str:
        if version:
            return str(version)
        file_path = src.replace(paths.trailingslashit(self.config.url), self.config.path, 1)
        if paths.path_exists(file_path):
            return paths.content_hash(file_path)
        return self.config.version

    def script(
        self, handle: str, src: str, options: Optional[Mapping[str, Any]] = None, **kwargs: Any
    ) -> Union["AssetManager", AssetError]:
        """Register a script; returns the manager, or an AssetError without side effects."""
        options = {**dict(options or {}), **kwargs}
        error = self._validate(handle, src, options)
        if error is not None:
            return error

        args = self._merge({
            "deps": self.config.script_deps,
            "version": self.config.version,
            "in_footer": self.config.in_footer,
            "scope": self.config.scope,
            "screens": self.config.screens,
            "condition": None,
            "async_": False,
            "defer": False,
            "localize": None,
        }, options)
        resolved = self.resolve_path(src)
        condition = args["condition"]

        self._scripts.add(handle, ScriptAsset(
            handle=handle,
            src=resolved,
            deps=list(args["deps"] or []),
            version=self._version_for(resolved, args["version"]),
            scope=AssetScope.coerce(args["scope"] or self.config.scope),
            screens=list(args["screens"] or []),
            condition=condition if callable(condition) else None,
            in_footer=bool(args["in_footer"]),
            async_=bool(args["async_"]),
            defer=bool(args["defer"]),
            localize=Localization.coerce(args["localize"]),
        ))
        return self

    def style(
        self, handle: str, src: str, options: Optional[Mapping[str, Any]] = None, **kwargs: Any
    ) -> Union["AssetManager", AssetError]:
        """Register a stylesheet; returns the manager, or an AssetError without side effects."""
        options = {**dict(options or {}), **kwargs}
        error = self._validate(handle, src, options)
        if error is not None:
            return error

        args = self._merge({
            "deps": self.config.style_deps,
            "version": self.config.version,
            "media": self.config.media,
            "scope": self.config.scope,
            "screens": self.config.screens,
            "condition": None,
        }, options)
        resolved = self.resolve_path(src)
        condition = args["condition"]

        self._styles.add(handle, StyleAsset(
            handle=handle,
            src=resolved,
            deps=list(args["deps"] or []),
            version=self._version_for(resolved, args["version"]),
            scope=AssetScope.coerce(args["scope"] or self.config.scope),
            screens=list(args["screens"] or []),
            condition=condition if callable(condition) else None,
            media=str(args["media"] or "all"),
        ))
        return self

    def register(self, assets: Iterable[Mapping[str, Any]]) -> "AssetManager":
        """
        Register many assets at once.

        Items without a handle or src are skipped; the kind comes from the
        ``type`` (or ``kind``) key or from the file extension. Per-item outcomes
        land in ``last_registration``.
        """
        report = RegistrationReport()
        for index, asset in enumerate(assets or []):
            handle = asset.get("handle")
            src = asset.get("src")
            if not handle or not src:
                logger.warning("enqueue_skip_invalid index=%d handle=%r", index, handle)
                report.skipped.append(index)
                continue

            kind = asset.get("type") or asset.get("kind") or kind_for_source(src)
            if kind == AssetKind.SCRIPT:
                result = self.script(handle, src, asset)
            else:
                result = self.style(handle, src, asset)

            if isinstance(result, AssetError):
                logger.warning("enqueue_register_failed handle=%s error=%s", handle, result.message)
                report.failed.append((handle, result))
            else:
                report.registered.append(handle)

        self.last_registration = report
        return self

    def add_inline(self, handle: str, data: str, kind: str = "script", position: str = "after") -> "AssetManager":
        """Attach inline code to a handle; ``position`` only applies to scripts."""
        if kind == AssetKind.SCRIPT:
            self.registry.add_inline_script(handle, data, position)
        else:
            self.registry.add_inline_style(handle, data)
        return self

    def add_dependency(self, handle: str, dependency: str, kind: str = "script") -> "AssetManager":
        collection = self._scripts if kind == AssetKind.SCRIPT else self._styles
        asset = collection.get(handle)
        if asset is not None and dependency not in asset.deps:
            collection.update(handle, deps=[*asset.deps, dependency])
        return self

    def deregister(self, handle: str, kind: str = "both") -> "AssetManager":
        if kind in ("both", AssetKind.SCRIPT):
            self._scripts.remove(handle)
        if kind in ("both", AssetKind.STYLE):
            self._styles.remove(handle)
        return self

    # ---------------------------
    # Paths
    # ---------------------------
    def get_asset_url(self, path: str) -> str:
        return self.resolve_path(path)

    def resolve_path(self, src: str) -> str:
        if paths.is_absolute_url(src):
            return src
        if src.startswith("/"):
            return src

        base_url = paths.trailingslashit(self.config.url) + self.config.assets_url
        if self.config.minify and not self.is_debug():
            src = paths.minify_path(src)
        return paths.trailingslashit(base_url) + src.lstrip("/")

    # ---------------------------
    # Enqueue
    # ---------------------------
    def enqueue_admin(self, hook_suffix: str, registry: Optional[AssetRegistry] = None) -> None:
        self.enqueue_assets(AssetScope.ADMIN, hook_suffix, registry)

    def enqueue_public(self, registry: Optional[AssetRegistry] = None) -> None:
        self.enqueue_assets(AssetScope.PUBLIC, "", registry)

    def enqueue_assets(
        self,
        context: Union[AssetScope, str],
        hook_suffix: str = "",
        registry: Optional[AssetRegistry] = None,
    ) -> None:
        """Enqueue every eligible script, then every eligible style."""
        context = AssetScope.coerce(context)
        target = registry if registry is not None else self.registry

        for handle, script in self._scripts.all().items():
            if self.should_enqueue(script, context, hook_suffix):
                self._enqueue_script(target, handle, script)

        for handle, style in self._styles.all().items():
            if self.should_enqueue(style, context, hook_suffix):
                target.enqueue_style(handle, style.src, style.deps, style.version, style.media)

    def should_enqueue(self, asset: Asset, context: Union[AssetScope, str], hook_suffix: str = "") -> bool:
        """
        Scope always applies. A condition, when present, is evaluated on every
        call and replaces the admin screen filter.
        """
        context = AssetScope.coerce(context)
        if asset.scope is not AssetScope.BOTH and asset.scope is not context:
            return False

        if asset.condition is not None:
            return bool(asset.condition())

        if context is AssetScope.ADMIN and asset.screens:
            return hook_suffix in asset.screens
        return True

    def _enqueue_script(self, registry: AssetRegistry, handle: str, script: ScriptAsset) -> None:
        registry.enqueue_script(handle, script.src, script.deps, script.version, script.in_footer)

        if script.localize is not None:
            registry.localize_script(handle, script.localize.name, script.localize.data)

        if script.async_ or script.defer:
            registry.add_tag_filter(loading_attribute_filter(handle, async_=script.async_, defer=script.defer))


def loading_attribute_filter(handle: str, *, async_: bool, defer: bool):
    """Tag filter adding ``async``/``defer`` before ``src`` on the tag of ``handle`` only."""

    def tag_filter(tag: str, tag_handle: str) -> str:
        if tag_handle != handle:
            return tag
        if async_:
            tag = tag.replace(" src", " async src", 1)
        if defer:
            tag = tag.replace(" src", " defer src", 1)
        return tag

    return tag_filter
