"""
Prefix/suffix plugin — namespaces keys in storage.

build_key wraps every key; after_set_item and after_get_item unwrap
the key again so callers only ever see the key they passed in.
"""

from __future__ import annotations

import dataclasses

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from stashit.core.errors import ConfigError
from stashit.core.types import Hook, HookArgs, Key, Plugin


class PrefixSuffixOptions(BaseModel):
    prefix: str | None = None
    suffix: str | None = None

    @field_validator("prefix", "suffix")
    @classmethod
    def _not_blank(cls, value: str | None) -> str | None:
        if value is not None:
            value = value.strip()
            if not value:
                raise ValueError("must not be blank")
        return value

    @model_validator(mode="after")
    def _prefix_or_suffix(self) -> PrefixSuffixOptions:
        if not self.prefix and not self.suffix:
            raise ValueError("Either prefix or suffix should be set.")
        return self


def _drop_prefix(key: Key, prefix: str) -> Key:
    if prefix and key.startswith(prefix):
        return key[len(prefix):]
    return key


def _drop_suffix(key: Key, suffix: str) -> Key:
    if suffix and key.endswith(suffix):
        return key[: -len(suffix)]
    return key


def create_prefix_suffix_plugin(prefix: str | None = None, suffix: str | None = None) -> Plugin:
    """
    Create a plugin that prefixes and/or suffixes every key.

    Usage:
        stash.register_plugins([create_prefix_suffix_plugin(prefix="app-")])
        await stash.set_item("user", "Alex")  # stored as "app-user"

    Raises:
        ConfigError: If neither prefix nor suffix is set, or one is blank
    """
    try:
        options = PrefixSuffixOptions(prefix=prefix, suffix=suffix)
    except ValidationError as e:
        raise ConfigError(f"Invalid prefix/suffix plugin options: {e}") from e

    prefix = options.prefix or ""
    suffix = options.suffix or ""

    def unwrap(key: Key) -> Key:
        return _drop_prefix(_drop_suffix(key, suffix), prefix)

    async def build_key(args: HookArgs) -> HookArgs:
        return {"key": f"{prefix}{args['key']}{suffix}"}

    async def after_set_item(args: HookArgs) -> HookArgs:
        item = args["item"]
        return {
            "key": unwrap(args["key"]),
            "item": dataclasses.replace(item, key=unwrap(item.key)),
        }

    async def after_get_item(args: HookArgs) -> HookArgs | None:
        item = args["item"]
        if item is None:
            return None
        return {
            "key": unwrap(args["key"]),
            "item": dataclasses.replace(item, key=unwrap(item.key)),
        }

    return Plugin(
        {
            Hook.BUILD_KEY: build_key,
            Hook.AFTER_SET_ITEM: after_set_item,
            Hook.AFTER_GET_ITEM: after_get_item,
        },
        name="prefix_suffix",
    )
