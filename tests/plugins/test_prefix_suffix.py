"""Tests for the prefix/suffix plugin."""

import pytest
from stashit.adapters.base import AdapterView
from stashit.adapters.memory import MemoryAdapter
from stashit.core.errors import ConfigError
from stashit.core.stash import StashIt
from stashit.core.types import Hook, Item
from stashit.plugins.prefix_suffix import create_prefix_suffix_plugin
from stashit.testing.helpers import get_handler


@pytest.fixture
def view():
    return AdapterView(MemoryAdapter())


@pytest.mark.parametrize(
    "options",
    [{}, {"prefix": ""}, {"suffix": "   "}, {"prefix": None, "suffix": None}, {"prefix": " ", "suffix": "x"}],
)
def test_invalid_options(options):
    with pytest.raises(ConfigError):
        create_prefix_suffix_plugin(**options)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "options, expected",
    [
        ({"prefix": "pre-"}, "pre-key"),
        ({"suffix": "-suf"}, "key-suf"),
        ({"prefix": "pre-", "suffix": "-suf"}, "pre-key-suf"),
        ({"prefix": "  pre_ "}, "pre_key"),
    ],
)
async def test_build_key(view, options, expected):
    handler = get_handler(Hook.BUILD_KEY, create_prefix_suffix_plugin(**options))
    assert await handler({"key": "key", "adapter": view}) == {"key": expected}


@pytest.mark.asyncio
async def test_after_set_item_unwraps_key(view):
    handler = get_handler(Hook.AFTER_SET_ITEM, create_prefix_suffix_plugin(prefix="pre-", suffix="-suf"))
    item = Item(key="pre-key-suf", value="value", extra={})

    result = await handler(
        {"key": "pre-key-suf", "value": "value", "extra": {}, "item": item, "adapter": view}
    )

    assert result == {"key": "key", "item": Item(key="key", value="value", extra={})}
    assert item.key == "pre-key-suf"


@pytest.mark.asyncio
async def test_after_get_item_missing_item_unchanged(view):
    handler = get_handler(Hook.AFTER_GET_ITEM, create_prefix_suffix_plugin(prefix="pre-"))
    assert await handler({"key": "pre-key", "item": None, "adapter": view}) is None


@pytest.mark.asyncio
async def test_key_without_affix_is_left_alone(view):
    handler = get_handler(Hook.AFTER_GET_ITEM, create_prefix_suffix_plugin(prefix="pre-"))
    item = Item(key="other", value=1, extra={})

    result = await handler({"key": "other", "item": item, "adapter": view})

    assert result["item"].key == "other"


@pytest.mark.asyncio
async def test_through_stash():
    adapter = MemoryAdapter()
    stash = StashIt(adapter, [create_prefix_suffix_plugin(prefix="app-", suffix="-v1")])

    item = await stash.set_item("user", "Alex", {"a": 1})

    assert item == Item(key="user", value="Alex", extra={"a": 1})
    assert await adapter.get_item("app-user-v1") == Item(key="app-user-v1", value="Alex", extra={"a": 1})
    assert await stash.get_item("user") == Item(key="user", value="Alex", extra={"a": 1})
    assert await stash.has_item("user") is True
    assert await stash.get_extra("user") == {"a": 1}
    assert await stash.remove_item("user") is True
    assert await adapter.has_item("app-user-v1") is False


def test_get_handler_missing_hook():
    with pytest.raises(KeyError, match="Handler 'before_get_item' was not found"):
        get_handler(Hook.BEFORE_GET_ITEM, create_prefix_suffix_plugin(prefix="p"))
