"""Error values returned (not raised) by the enqueue API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

ASSET_ERROR = "asset_error"
INVALID_ASSET = "invalid_asset"


@dataclass(frozen=True)
class AssetError:
    """Tagged error carrier: a stable code, a readable message and payload data."""

    code: str
    message: str
    data: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:  # pragma: no cover - string repr helper
        return f"[{self.code}] {self.message}"


class InvalidBaseFileError(ValueError):
    """The base file used to locate assets does not exist."""

    def __init__(self, file: str):
        super().__init__(f"Invalid file path: {file}")
        self.file = file


def is_asset_error(value: object) -> bool:
    return isinstance(value, AssetError)
