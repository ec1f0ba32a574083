"""
stashit shared types — keys, values, items, hooks and plugins.

Values and extras are plain JSON-safe Python objects.
Hook arguments are plain dicts; their shape per hook is declared
below as TypedDicts so handlers can be annotated precisely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Literal, Mapping, TypedDict, Union

if TYPE_CHECKING:
    from stashit.adapters.base import AdapterView


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Data
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

Key = str
"""Identifier of an item. Must fully match [A-Za-z0-9_-]+."""

Value = Union[str, int, float, bool, None, list["Value"], dict[str, "Value"]]
"""Anything that survives a JSON round-trip unchanged."""

Extra = dict[str, Value]
"""Metadata stored alongside a value."""


@dataclass(slots=True)
class Item:
    """A stored item. Compared by value."""

    key: Key
    value: Value
    extra: Extra = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "value": self.value, "extra": self.extra}


# Not-found outcomes are sentinels, never exceptions.
GetItemResult = Union[Item, None]
GetExtraResult = Union[Extra, None]
SetExtraResult = Union[Extra, Literal[False]]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Hooks
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class Hook:
    """
    Hook name constants.

    build_key runs once per operation, then before_<op>, the adapter
    call and after_<op>.
    """

    BUILD_KEY = "build_key"

    BEFORE_SET_ITEM = "before_set_item"
    AFTER_SET_ITEM = "after_set_item"
    BEFORE_GET_ITEM = "before_get_item"
    AFTER_GET_ITEM = "after_get_item"
    BEFORE_HAS_ITEM = "before_has_item"
    AFTER_HAS_ITEM = "after_has_item"
    BEFORE_REMOVE_ITEM = "before_remove_item"
    AFTER_REMOVE_ITEM = "after_remove_item"
    BEFORE_SET_EXTRA = "before_set_extra"
    AFTER_SET_EXTRA = "after_set_extra"
    BEFORE_GET_EXTRA = "before_get_extra"
    AFTER_GET_EXTRA = "after_get_extra"

    ALL: tuple[str, ...] = (
        BUILD_KEY,
        BEFORE_SET_ITEM,
        AFTER_SET_ITEM,
        BEFORE_GET_ITEM,
        AFTER_GET_ITEM,
        BEFORE_HAS_ITEM,
        AFTER_HAS_ITEM,
        BEFORE_REMOVE_ITEM,
        AFTER_REMOVE_ITEM,
        BEFORE_SET_EXTRA,
        AFTER_SET_EXTRA,
        BEFORE_GET_EXTRA,
        AFTER_GET_EXTRA,
    )


class _AdapterArg(TypedDict):
    adapter: AdapterView


class BuildKeyArgs(_AdapterArg):
    key: Key


class KeyArgs(_AdapterArg):
    """Args of before_get_item, before_has_item, before_remove_item, before_get_extra."""

    key: Key


class BeforeSetItemArgs(_AdapterArg):
    key: Key
    value: Value
    extra: Extra


class AfterSetItemArgs(BeforeSetItemArgs):
    item: Item


class AfterGetItemArgs(_AdapterArg):
    key: Key
    item: GetItemResult


class ResultArgs(_AdapterArg):
    """Args of after_has_item and after_remove_item."""

    key: Key
    result: bool


class BeforeSetExtraArgs(_AdapterArg):
    key: Key
    extra: Extra


class AfterSetExtraArgs(_AdapterArg):
    key: Key
    extra: SetExtraResult


class AfterGetExtraArgs(_AdapterArg):
    key: Key
    extra: GetExtraResult


HookArgs = dict[str, Any]

# A handler receives the running args (plus "adapter") and returns the
# fields it wants to change. Returning None changes nothing.
HookHandler = Callable[[Any], Awaitable[Union[Mapping[str, Any], None]]]


@dataclass
class Plugin:
    """
    A bundle of hook handlers registered together.

    Usage:
        async def add_prefix(args):
            return {"key": f"app-{args['key']}"}

        stash.register_plugins([Plugin({Hook.BUILD_KEY: add_prefix}, name="prefix")])
    """

    hook_handlers: dict[str, HookHandler] = field(default_factory=dict)
    name: str = ""
