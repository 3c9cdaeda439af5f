"""Handle-keyed storage for asset descriptors."""

from __future__ import annotations

import dataclasses
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar

from .descriptors import Asset

TAsset = TypeVar("TAsset", bound=Asset)


class AssetCollection(Generic[TAsset]):
    """Ordered mapping of handle -> descriptor owned by a single manager."""

    def __init__(self) -> None:
        self._items: Dict[str, TAsset] = {}

    def add(self, handle: str, asset: TAsset) -> None:
        """Insert or overwrite the descriptor stored under ``handle``."""
        self._items[handle] = asset

    def get(self, handle: str) -> Optional[TAsset]:
        return self._items.get(handle)

    def all(self) -> Dict[str, TAsset]:
        return dict(self._items)

    def has(self, handle: str) -> bool:
        return handle in self._items

    def remove(self, handle: str) -> None:
        self._items.pop(handle, None)

    def clear(self) -> None:
        self._items.clear()

    def filter(self, predicate: Callable[[TAsset], bool]) -> Dict[str, TAsset]:
        """Return the subset accepted by ``predicate``; the collection is left untouched."""
        return {handle: asset for handle, asset in self._items.items() if predicate(asset)}

    def count(self) -> int:
        return len(self._items)

    def handles(self) -> List[str]:
        return list(self._items.keys())

    def update(self, handle: str, **fields: Any) -> bool:
        """
        Shallow-merge ``fields`` into an existing descriptor.

        Returns False (and changes nothing) when ``handle`` is unknown.
        Unknown field names raise ``TypeError``.
        """
        current = self._items.get(handle)
        if current is None:
            return False
        self._items[handle] = dataclasses.replace(current, **fields)
        return True

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, handle: object) -> bool:
        return handle in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))
