"""
In-memory adapter — for tests and process-local caches.

Simple dict-based storage. Data lost when process exits.
"""

from __future__ import annotations

import copy

from stashit.adapters.base import StashItAdapter
from stashit.core.types import Extra, GetExtraResult, GetItemResult, Item, Key, SetExtraResult, Value


class MemoryAdapter(StashItAdapter):
    """
    In-memory item store.

    Stored values are deep copies, so mutating what you passed in or
    got back never changes what is stored.

    Usage:
        adapter = MemoryAdapter()
        await adapter.set_item("key", "value", {"source": "docs"})
        assert (await adapter.get_item("key")).value == "value"
    """

    def __init__(self) -> None:
        self._data: dict[Key, Item] = {}

    async def set_item(self, key: Key, value: Value, extra: Extra | None = None) -> Item:
        self.validate_key(key)
        item = Item(key=key, value=copy.deepcopy(value), extra=copy.deepcopy(extra or {}))
        self._data[key] = item
        return copy.deepcopy(item)

    async def get_item(self, key: Key) -> GetItemResult:
        item = self._data.get(key)
        return copy.deepcopy(item) if item is not None else None

    async def has_item(self, key: Key) -> bool:
        return key in self._data

    async def remove_item(self, key: Key) -> bool:
        self.validate_key(key)
        if key in self._data:
            del self._data[key]
            return True
        return False

    async def set_extra(self, key: Key, extra: Extra) -> SetExtraResult:
        self.validate_key(key)
        item = self._data.get(key)
        if item is None:
            return False
        item.extra = copy.deepcopy(extra)
        return copy.deepcopy(extra)

    async def get_extra(self, key: Key) -> GetExtraResult:
        item = self._data.get(key)
        return copy.deepcopy(item.extra) if item is not None else None
