from __future__ import annotations

import os
import tempfile
from typing import Any, List, Tuple

BASE_URL = "https://example.com/plugins/demo/"


class PluginDirMixin:
    """Creates a throwaway plugin directory holding ``plugin.py`` for each test."""

    def setUp(self) -> None:
        super().setUp()
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.plugin_dir = self._tmp.name
        self.plugin_file = os.path.join(self.plugin_dir, "plugin.py")
        with open(self.plugin_file, "w", encoding="utf-8") as fh:
            fh.write("# plugin\n")

    def write_asset(self, relative: str, content: bytes) -> str:
        path = os.path.join(self.plugin_dir, relative)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as fh:
            fh.write(content)
        return path


class RecordingRegistry:
    """AssetRegistry double keeping every call in order."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, ...]] = []
        self.tag_filters: list = []

    def enqueue_script(self, handle, src, deps, version, in_footer) -> None:
        self.calls.append(("script", handle, src, list(deps), version, in_footer))

    def enqueue_style(self, handle, src, deps, version, media) -> None:
        self.calls.append(("style", handle, src, list(deps), version, media))

    def localize_script(self, handle, name, data) -> None:
        self.calls.append(("localize", handle, name, dict(data)))

    def add_inline_script(self, handle, data, position="after") -> None:
        self.calls.append(("inline_script", handle, data, position))

    def add_inline_style(self, handle, data) -> None:
        self.calls.append(("inline_style", handle, data))

    def add_tag_filter(self, tag_filter) -> None:
        self.tag_filters.append(tag_filter)

    def handles(self, kind: str) -> List[str]:
        return [call[1] for call in self.calls if call[0] == kind]
