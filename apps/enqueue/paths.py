"""Filesystem and URL helpers used to resolve asset sources."""

from __future__ import annotations

import hashlib
import os
import posixpath
from urllib.parse import urlsplit

from . import conf


def path_exists(path: str) -> bool:
    return bool(path) and os.path.exists(path)


def content_hash(path: str) -> str:
    """md5 hex digest of the file contents."""
    digest = hashlib.md5()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(64 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def trailingslashit(value: str) -> str:
    return value.rstrip("/\\") + "/"


def base_path_of(file: str) -> str:
    """Directory holding ``file``, with a trailing separator."""
    return trailingslashit(os.path.dirname(os.path.abspath(file)))


def base_url_of(file: str) -> str:
    """Public URL of the directory holding ``file``, served below STATIC_URL."""
    directory = os.path.basename(os.path.dirname(os.path.abspath(file)))
    return trailingslashit(trailingslashit(conf.static_url()) + directory)


def is_absolute_url(value: str) -> bool:
    """True when ``value`` carries both a scheme and a network location."""
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def minify_path(path: str) -> str:
    """Insert ``.min`` before the final extension: ``js/app.js`` -> ``js/app.min.js``."""
    directory, name = posixpath.split(path)
    stem, ext = posixpath.splitext(name)
    if not ext:
        return path
    minified = f"{stem}.min{ext}"
    return posixpath.join(directory, minified) if directory else minified
