"""Read-only plugin — refuses every operation that would change storage."""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from stashit.core.errors import ConfigError, ReadOnlyError
from stashit.core.types import Hook, HookArgs, Plugin


class ReadOnlyOptions(BaseModel):
    set_item_message: str = Field(default="Overwriting items is not allowed!", min_length=1)
    remove_item_message: str = Field(default="Removing items is not allowed!", min_length=1)
    set_extra_message: str = Field(
        default="Overwriting data in items is not allowed!", min_length=1
    )

    model_config = {"str_strip_whitespace": True, "extra": "forbid"}


def create_read_only_plugin(**messages: str) -> Plugin:
    """
    Create a plugin that only lets reads through.

    set_item, remove_item and set_extra raise ReadOnlyError before the
    adapter is called. Messages can be customized:

        create_read_only_plugin(remove_item_message="Archive is frozen")
    """
    try:
        options = ReadOnlyOptions(**messages)
    except ValidationError as e:
        raise ConfigError(f"Invalid read-only plugin options: {e}") from e

    def refuse(message: str):
        async def handler(args: HookArgs) -> HookArgs:
            raise ReadOnlyError(message, details={"key": args["key"]})

        return handler

    return Plugin(
        {
            Hook.BEFORE_SET_ITEM: refuse(options.set_item_message),
            Hook.BEFORE_REMOVE_ITEM: refuse(options.remove_item_message),
            Hook.BEFORE_SET_EXTRA: refuse(options.set_extra_message),
        },
        name="read_only",
    )
