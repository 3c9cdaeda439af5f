"""Asset descriptors stored by the manager collections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Mapping, Optional

Condition = Callable[[], bool]


class AssetKind(str, Enum):
    SCRIPT = "script"
    STYLE = "style"


class AssetScope(str, Enum):
    ADMIN = "admin"
    PUBLIC = "public"
    BOTH = "both"

    @classmethod
    def coerce(cls, value: "AssetScope | str") -> "AssetScope":
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        # "frontend" is the legacy spelling of the public context
        if raw == "frontend":
            return cls.PUBLIC
        return cls(raw)


STYLE_EXTENSIONS = frozenset({"css", "less", "sass", "scss"})


@dataclass(frozen=True)
class Localization:
    """Data exposed to a script as a global JavaScript variable."""

    name: str
    data: Mapping[str, Any]

    @classmethod
    def coerce(cls, value: "Localization | Mapping[str, Any] | None") -> Optional["Localization"]:
        if value is None or isinstance(value, Localization):
            return value
        if not value:
            return None
        return cls(name=str(value["name"]), data=dict(value.get("data") or {}))


@dataclass
class Asset:
    handle: str
    src: str
    deps: list[str] = field(default_factory=list)
    version: str = ""
    scope: AssetScope = AssetScope.BOTH
    screens: list[str] = field(default_factory=list)
    condition: Optional[Condition] = None

    kind: ClassVar[AssetKind]


@dataclass
class ScriptAsset(Asset):
    kind: ClassVar[AssetKind] = AssetKind.SCRIPT

    in_footer: bool = True
    async_: bool = False
    defer: bool = False
    localize: Optional[Localization] = None


@dataclass
class StyleAsset(Asset):
    kind: ClassVar[AssetKind] = AssetKind.STYLE

    media: str = "all"


def kind_for_source(src: str) -> AssetKind:
    """Guess the asset kind from the file extension of ``src``."""
    path = src.split("?", 1)[0].split("#", 1)[0]
    name = path.rsplit("/", 1)[-1]
    extension = name.rsplit(".", 1)[-1].lower() if "." in name else ""
    if extension in STYLE_EXTENSIONS:
        return AssetKind.STYLE
    return AssetKind.SCRIPT
