"""
Storage adapter interface.

An adapter is the only component that moves data to and from a backing
store. Keys arrive already built by the dispatcher's hooks.

Adapters must:
    - validate keys on mutating operations before touching storage
    - report missing items with sentinels (None / False), never errors
    - let backend failures propagate
"""

from __future__ import annotations

import logging
import re
import uuid
from abc import ABC, abstractmethod
from typing import Any

from stashit.core.errors import InvalidKeyError
from stashit.core.types import Extra, GetExtraResult, GetItemResult, Item, Key, SetExtraResult, Value

logger = logging.getLogger(__name__)

KEY_PATTERN = re.compile(r"[A-Za-z0-9_-]+")

CHECK_STORAGE_KEY_PREFIX = "check_storage_key_"


class StashItAdapter(ABC):
    """
    Abstract base class for storage backends.

    Values and extras are JSON-safe Python objects; how they are
    serialized is up to the backend.

    Implementations:
        MemoryAdapter — dict-based, for tests and caches
        SqliteAdapter — file-based, via aiosqlite
    """

    @abstractmethod
    async def set_item(self, key: Key, value: Value, extra: Extra | None = None) -> Item:
        """Create or overwrite an item. Returns the stored item."""
        ...

    @abstractmethod
    async def get_item(self, key: Key) -> GetItemResult:
        """Get an item. Returns None if not found."""
        ...

    @abstractmethod
    async def has_item(self, key: Key) -> bool:
        """Check if an item exists."""
        ...

    @abstractmethod
    async def remove_item(self, key: Key) -> bool:
        """Remove an item. Returns True if it existed."""
        ...

    @abstractmethod
    async def set_extra(self, key: Key, extra: Extra) -> SetExtraResult:
        """Overwrite the extra of an existing item. Returns False if not found."""
        ...

    @abstractmethod
    async def get_extra(self, key: Key) -> GetExtraResult:
        """Get the extra of an item. Returns None if not found."""
        ...

    async def connect(self) -> None:
        """Open connections or other resources. No-op by default."""

    async def disconnect(self) -> None:
        """Release what connect() opened. No-op by default."""

    def validate_key(self, key: Key) -> None:
        """
        Reject keys with characters outside [A-Za-z0-9_-], or empty keys.

        Raises:
            InvalidKeyError: With the offending key in the message
        """
        if not isinstance(key, str) or KEY_PATTERN.fullmatch(key) is None:
            raise InvalidKeyError(
                f"Invalid key: '{key}'. Only alphanumeric characters (a-z, A-Z, 0-9), "
                f"underscores (_), and hyphens (-) are allowed.",
                key=key,
            )

    async def check_storage(self) -> bool:
        """
        Smoke-test the backend through the public operations.

        Uses a throwaway "check_storage_key_<random>" item which is removed
        afterwards on a best-effort basis. The first failing operation's
        error propagates once cleanup and disconnect have run.

        Returns:
            True if every operation succeeded
        """
        key = f"{CHECK_STORAGE_KEY_PREFIX}{uuid.uuid4().hex}"
        logger.debug(f"Checking storage of {type(self).__name__} with key '{key}'")

        await self.connect()
        try:
            try:
                await self.set_item(key, "value", {"extra": "value"})
                await self.has_item(key)
                await self.get_item(key)
                await self.get_extra(key)
                await self.set_item(key, "new value", {"extra": "new value"})
                await self.set_extra(key, {"extra": "newest value"})
            finally:
                try:
                    await self.remove_item(key)
                except Exception as e:
                    logger.debug(f"Ignoring cleanup failure for '{key}': {e}")
        finally:
            await self.disconnect()

        return True


class AdapterView:
    """
    Read-only handle on an adapter, given to hook handlers.

    Exposes the six data operations; attributes cannot be set or deleted,
    so handlers cannot replace the adapter's methods.

    Usage:
        async def before_get_item(args):
            item = await args["adapter"].get_item(args["key"])
            ...
    """

    __slots__ = ("__adapter",)

    def __init__(self, adapter: StashItAdapter) -> None:
        object.__setattr__(self, "_AdapterView__adapter", adapter)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Adapter view is read-only, cannot set '{name}'")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Adapter view is read-only, cannot delete '{name}'")

    def __repr__(self) -> str:
        return f"AdapterView({self.name})"

    @property
    def name(self) -> str:
        """Class name of the wrapped adapter."""
        return type(self.__adapter).__name__

    async def set_item(self, key: Key, value: Value, extra: Extra | None = None) -> Item:
        return await self.__adapter.set_item(key, value, extra)

    async def get_item(self, key: Key) -> GetItemResult:
        return await self.__adapter.get_item(key)

    async def has_item(self, key: Key) -> bool:
        return await self.__adapter.has_item(key)

    async def remove_item(self, key: Key) -> bool:
        return await self.__adapter.remove_item(key)

    async def set_extra(self, key: Key, extra: Extra) -> SetExtraResult:
        return await self.__adapter.set_extra(key, extra)

    async def get_extra(self, key: Key) -> GetExtraResult:
        return await self.__adapter.get_extra(key)
