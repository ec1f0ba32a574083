"""
StashIt — the hook pipeline around a storage adapter.

Every public operation runs the same fixed pipeline:

    connect → build_key → before_<op> → adapter.<op> → after_<op> → disconnect

Each hook is a chain of handlers folded over a dict of args: a handler
gets the running args (plus a read-only "adapter") and returns the
fields it wants to change. disconnect() runs on every exit path and
errors propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from stashit.adapters.base import AdapterView, StashItAdapter
from stashit.core.registry import HookRegistry
from stashit.core.types import (
    Extra,
    GetExtraResult,
    GetItemResult,
    Hook,
    HookArgs,
    Item,
    Key,
    Plugin,
    SetExtraResult,
    Value,
)

if TYPE_CHECKING:
    from stashit.core.config import StashItConfig

logger = logging.getLogger(__name__)

# operation → (adapter argument fields, result field)
OPERATIONS: dict[str, tuple[tuple[str, ...], str]] = {
    "set_item": (("key", "value", "extra"), "item"),
    "get_item": (("key",), "item"),
    "has_item": (("key",), "result"),
    "remove_item": (("key",), "result"),
    "set_extra": (("key", "extra"), "extra"),
    "get_extra": (("key",), "extra"),
}


class StashIt:
    """
    Storage-agnostic item store with plugin hooks.

    Usage:
        stash = StashIt(MemoryAdapter())
        stash.register_plugins([create_prefix_suffix_plugin(prefix="app-")])

        await stash.set_item("user", {"name": "Alex"}, {"source": "signup"})
        item = await stash.get_item("user")      # stored under "app-user"
        await stash.remove_item("user")

    Concurrent calls share one adapter and are not serialized; two
    overlapping calls for the same key race at the adapter.
    """

    def __init__(self, adapter: StashItAdapter, plugins: Iterable[Plugin] | None = None) -> None:
        self._adapter = adapter
        self._view = AdapterView(adapter)
        self._registry = HookRegistry()

        if plugins:
            self.register_plugins(plugins)

    @classmethod
    def from_config(cls, config: StashItConfig) -> StashIt:
        """Build a StashIt with the adapter and plugins a config describes."""
        from stashit.core.bootstrap import create_adapter, create_plugins

        return cls(create_adapter(config), create_plugins(config))

    @property
    def adapter(self) -> AdapterView:
        """Read-only view of the adapter in use."""
        return self._view

    @property
    def registry(self) -> HookRegistry:
        return self._registry

    def register_plugins(self, plugins: Iterable[Plugin]) -> None:
        """Register plugins. Their handlers run after those already registered."""
        self._registry.register_plugins(plugins)

    async def check_storage(self) -> bool:
        """Run the adapter's self-test. Returns True or raises its first failure."""
        return await self._adapter.check_storage()

    # ━━━ Operations ━━━

    async def set_item(self, key: Key, value: Value, extra: Extra | None = None) -> Item:
        """Create or overwrite an item."""
        return await self._run("set_item", {"key": key, "value": value, "extra": extra or {}})

    async def get_item(self, key: Key) -> GetItemResult:
        """Get an item, or None if it does not exist."""
        return await self._run("get_item", {"key": key})

    async def has_item(self, key: Key) -> bool:
        return await self._run("has_item", {"key": key})

    async def remove_item(self, key: Key) -> bool:
        """Remove an item. Returns False if there was nothing to remove."""
        return await self._run("remove_item", {"key": key})

    async def set_extra(self, key: Key, extra: Extra) -> SetExtraResult:
        """Overwrite the extra of an existing item. Returns False if it does not exist."""
        return await self._run("set_extra", {"key": key, "extra": extra})

    async def get_extra(self, key: Key) -> GetExtraResult:
        """Get the extra of an item, or None if it does not exist."""
        return await self._run("get_extra", {"key": key})

    # ━━━ Internals ━━━

    async def _run(self, operation: str, args: HookArgs) -> Any:
        """Run one operation through the full pipeline."""
        fields, result_field = OPERATIONS[operation]

        await self._adapter.connect()
        try:
            built_key = await self._build_key(args["key"])
            before = await self._call(f"before_{operation}", {**args, "key": built_key})

            method = getattr(self._adapter, operation)
            result = await method(*(before[name] for name in fields))

            after = await self._call(f"after_{operation}", {**before, result_field: result})
        finally:
            await self._adapter.disconnect()

        logger.debug(f"{operation} key='{args['key']}' built='{built_key}'")
        return after[result_field]

    async def _build_key(self, key: Key) -> Key:
        args = await self._call(Hook.BUILD_KEY, {"key": key})
        return args["key"]

    async def _call(self, hook: str, args: HookArgs) -> HookArgs:
        """
        Fold the hook's handlers over args.

        Fields a handler returns overwrite the running args; fields it
        leaves out are kept. The adapter view is never part of the result.
        """
        state = dict(args)

        for handler in self._registry.get(hook):
            changes = await handler({**state, "adapter": self._view})
            if changes:
                state.update((name, value) for name, value in changes.items() if name != "adapter")

        return state
