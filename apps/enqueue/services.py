"""
One-call helper around AssetManager.

Example::

    register_assets(__file__, [
        {"handle": "my-script", "src": "js/script.js", "deps": ["jquery"], "async": True},
        {"handle": "my-style", "src": "css/style.css", "media": "all"},
    ], {"debug": settings.DEBUG, "minify": True, "assets_url": "dist/assets"})
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from . import paths
from .errors import INVALID_ASSET, AssetError, InvalidBaseFileError
from .manager import AssetManager

logger = logging.getLogger("enqueue")

ErrorCallback = Callable[[Exception], Any]


def register_assets(
    file: str,
    assets: Iterable[Mapping[str, Any]],
    config: Optional[Mapping[str, Any]] = None,
    error_callback: Optional[ErrorCallback] = None,
) -> Union[AssetManager, AssetError, None]:
    """
    Build an attached AssetManager for ``file`` and register ``assets`` on it.

    Returns the manager, an ``invalid_asset`` error when an entry lacks a handle
    or src (checked before anything is built), the error of the first asset the
    manager rejected, or None when an exception was raised (it is passed to
    ``error_callback`` when one is given).
    """
    config = dict(config or {})
    assets = list(assets or [])
    try:
        if not paths.path_exists(file):
            raise InvalidBaseFileError(file)

        for asset in assets:
            if not asset.get("handle") or not asset.get("src"):
                return AssetError(
                    INVALID_ASSET,
                    "Each asset must have a handle and src defined",
                    dict(asset),
                )

        manager = AssetManager(file, config)

        if config.get("debug"):
            manager.set_debug(bool(config["debug"]))
        if "minify" in config:
            manager.set_minify(bool(config["minify"]))
        if config.get("assets_url"):
            manager.set_assets_directory(config["assets_url"])

        if assets:
            manager.register(assets)
            error = manager.last_registration.first_error
            if error is not None:
                return error

        return manager.attach()
    except Exception as exc:
        logger.exception("enqueue_register_assets_failed file=%s", file)
        if error_callback is not None:
            error_callback(exc)
        return None
