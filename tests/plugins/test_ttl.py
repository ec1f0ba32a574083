"""Tests for the TTL plugin."""

from datetime import datetime, timedelta, timezone

import pytest
from stashit.adapters.base import AdapterView
from stashit.adapters.memory import MemoryAdapter
from stashit.core.errors import ConfigError, ReservedExtraError
from stashit.core.stash import StashIt
from stashit.core.types import Hook
from stashit.plugins.ttl import TTL_EXTRA_FIELD, create_ttl_plugin
from stashit.testing.helpers import get_handler


def ttl_extra(ttl: int, age_seconds: float) -> dict:
    created_at = datetime.now(timezone.utc) - timedelta(seconds=age_seconds)
    return {TTL_EXTRA_FIELD: {"ttl": ttl, "created_at": created_at.isoformat()}}


@pytest.fixture
def memory():
    return MemoryAdapter()


@pytest.fixture
def stash(memory):
    return StashIt(memory, [create_ttl_plugin(ttl=60)])


@pytest.mark.parametrize("ttl", [0, -1, 1.5, "60", True])
def test_invalid_ttl(ttl):
    with pytest.raises(ConfigError, match="Invalid TTL plugin options"):
        create_ttl_plugin(ttl)


@pytest.mark.asyncio
async def test_set_item_stamps_ttl(stash: StashIt, memory):
    before = datetime.now(timezone.utc)
    item = await stash.set_item("key", "value", {"a": 1})

    ttl_data = item.extra[TTL_EXTRA_FIELD]
    assert item.extra["a"] == 1
    assert ttl_data["ttl"] == 60
    assert datetime.fromisoformat(ttl_data["created_at"]) >= before
    assert (await memory.get_extra("key"))[TTL_EXTRA_FIELD] == ttl_data


@pytest.mark.asyncio
async def test_set_item_rejects_reserved_field(stash: StashIt, memory):
    with pytest.raises(ReservedExtraError, match="'__ttl' property, which is a reserved"):
        await stash.set_item("key", "value", {TTL_EXTRA_FIELD: "mine"})

    assert await memory.has_item("key") is False


@pytest.mark.asyncio
async def test_set_extra_rejects_reserved_field(stash: StashIt):
    await stash.set_item("key", "value")

    with pytest.raises(ReservedExtraError):
        await stash.set_extra("key", {TTL_EXTRA_FIELD: {}})


@pytest.mark.asyncio
async def test_live_item_is_kept(stash: StashIt, memory):
    await memory.set_item("key", "value", ttl_extra(60, age_seconds=10))

    assert (await stash.get_item("key")).value == "value"
    assert await stash.has_item("key") is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "operation, expected",
    [("get_item", None), ("has_item", False), ("get_extra", None), ("remove_item", False)],
)
async def test_expired_item_is_removed(stash: StashIt, memory, operation, expected):
    await memory.set_item("key", "value", ttl_extra(60, age_seconds=120))

    assert await getattr(stash, operation)("key") is expected
    assert await memory.has_item("key") is False


@pytest.mark.asyncio
async def test_set_extra_keeps_ttl(stash: StashIt, memory):
    original = ttl_extra(60, age_seconds=10)
    await memory.set_item("key", "value", original)

    result = await stash.set_extra("key", {"b": 2})

    assert result == {"b": 2, **original}
    assert await memory.get_extra("key") == {"b": 2, **original}


@pytest.mark.asyncio
async def test_set_extra_on_expired_item(stash: StashIt, memory):
    await memory.set_item("key", "value", ttl_extra(60, age_seconds=120))

    assert await stash.set_extra("key", {"b": 2}) is False
    assert await memory.has_item("key") is False


@pytest.mark.asyncio
async def test_items_without_ttl_are_untouched(stash: StashIt, memory):
    await memory.set_item("key", "value", {"a": 1})

    assert await stash.set_extra("key", {"b": 2}) == {"b": 2}
    assert (await stash.get_item("key")).extra == {"b": 2}


@pytest.mark.asyncio
async def test_before_get_item_handler_changes_nothing(memory):
    handler = get_handler(Hook.BEFORE_GET_ITEM, create_ttl_plugin(ttl=5))
    assert await handler({"key": "missing", "adapter": AdapterView(memory)}) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "ttl_data",
    [
        5,
        "60",
        [60],
        {"ttl": 60, "createdAt": "2020-01-01T00:00:00.000Z"},
        {"ttl": "60", "created_at": "2020-01-01T00:00:00+00:00"},
        {"ttl": True, "created_at": "2020-01-01T00:00:00+00:00"},
        {"ttl": 60, "created_at": "yesterday"},
        {"ttl": 60, "created_at": 1577836800},
    ],
)
@pytest.mark.parametrize("operation", ["get_item", "has_item", "get_extra"])
async def test_malformed_ttl_data_never_expires(stash: StashIt, memory, ttl_data, operation):
    await memory.set_item("key", "value", {TTL_EXTRA_FIELD: ttl_data})

    assert await getattr(stash, operation)("key") not in (None, False)
    assert await memory.has_item("key") is True


@pytest.mark.asyncio
async def test_malformed_ttl_data_on_remove_and_set_extra(stash: StashIt, memory):
    await memory.set_item("key", "value", {TTL_EXTRA_FIELD: {"ttl": 60, "createdAt": "2020-01-01T00:00:00.000Z"}})

    assert await stash.set_extra("key", {"b": 2}) == {"b": 2}
    assert await stash.remove_item("key") is True


@pytest.mark.asyncio
async def test_naive_created_at_is_utc(stash: StashIt, memory):
    created_at = (datetime.now(timezone.utc) - timedelta(seconds=120)).replace(tzinfo=None)
    await memory.set_item("key", "value", {TTL_EXTRA_FIELD: {"ttl": 60, "created_at": created_at.isoformat()}})

    assert await stash.get_item("key") is None
    assert await memory.has_item("key") is False
