"""
TTL plugin — items expire a fixed number of seconds after they are set.

The expiry data lives in the item's extra under TTL_EXTRA_FIELD:

    {"__ttl": {"ttl": 60, "created_at": "2026-01-01T12:00:00+00:00"}}

Expired items are removed lazily, through the adapter, by the before_*
hooks of every operation that touches an existing item.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from stashit.adapters.base import AdapterView
from stashit.core.errors import ConfigError, ReservedExtraError
from stashit.core.types import Extra, Hook, HookArgs, Key, Plugin

logger = logging.getLogger(__name__)

TTL_EXTRA_FIELD = "__ttl"


class TtlOptions(BaseModel):
    ttl: int = Field(gt=0, strict=True)


def _parse_ttl(ttl_data: Any) -> tuple[int, datetime] | None:
    """Return (ttl, created_at), or None when the data is not in the stamped shape."""
    if not isinstance(ttl_data, dict):
        return None

    ttl = ttl_data.get("ttl")
    created_at = ttl_data.get("created_at")
    if not isinstance(ttl, int) or isinstance(ttl, bool) or not isinstance(created_at, str):
        return None

    try:
        created = datetime.fromisoformat(created_at)
    except ValueError:
        return None

    # Naive timestamps are taken as UTC
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return ttl, created


def _check_reserved(extra: Extra) -> None:
    if TTL_EXTRA_FIELD in extra:
        raise ReservedExtraError(
            f"Extra contains '{TTL_EXTRA_FIELD}' property, which is a reserved property name.",
            field=TTL_EXTRA_FIELD,
        )


async def _remove_if_expired(adapter: AdapterView, key: Key) -> dict[str, Any] | None:
    """Remove the item if its TTL has passed. Returns the TTL data of a live item."""
    item = await adapter.get_item(key)
    if item is None:
        return None

    ttl_data = item.extra.get(TTL_EXTRA_FIELD)
    parsed = _parse_ttl(ttl_data)
    if parsed is None:
        if ttl_data is not None:
            logger.debug(f"Ignoring malformed TTL data of '{key}': {ttl_data!r}")
        return None

    ttl, created_at = parsed
    if (datetime.now(timezone.utc) - created_at).total_seconds() > ttl:
        await adapter.remove_item(key)
        logger.debug(f"Removed expired item '{key}'")
        return None

    return ttl_data


def create_ttl_plugin(ttl: int) -> Plugin:
    """
    Create a plugin that gives every stored item a time to live.

    Args:
        ttl: Lifetime in seconds, a positive integer

    Usage:
        stash.register_plugins([create_ttl_plugin(ttl=3600)])
    """
    try:
        options = TtlOptions(ttl=ttl)
    except ValidationError as e:
        raise ConfigError(f"Invalid TTL plugin options: {e}") from e

    async def before_set_item(args: HookArgs) -> HookArgs:
        _check_reserved(args["extra"])
        return {
            "extra": {
                **args["extra"],
                TTL_EXTRA_FIELD: {
                    "ttl": options.ttl,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                },
            }
        }

    async def expire(args: HookArgs) -> None:
        await _remove_if_expired(args["adapter"], args["key"])

    async def before_set_extra(args: HookArgs) -> HookArgs | None:
        _check_reserved(args["extra"])
        ttl_data = await _remove_if_expired(args["adapter"], args["key"])
        if ttl_data is None:
            return None
        return {"extra": {**args["extra"], TTL_EXTRA_FIELD: ttl_data}}

    return Plugin(
        {
            Hook.BEFORE_SET_ITEM: before_set_item,
            Hook.BEFORE_GET_ITEM: expire,
            Hook.BEFORE_HAS_ITEM: expire,
            Hook.BEFORE_GET_EXTRA: expire,
            Hook.BEFORE_REMOVE_ITEM: expire,
            Hook.BEFORE_SET_EXTRA: before_set_extra,
        },
        name="ttl",
    )
