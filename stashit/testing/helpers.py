"""Helpers for testing plugins."""

from __future__ import annotations

from stashit.core.types import HookHandler, Plugin


def get_handler(hook: str, plugin: Plugin) -> HookHandler:
    """
    Get a plugin's handler for a hook, to call it directly in tests.

    Usage:
        handler = get_handler(Hook.BUILD_KEY, plugin)
        assert await handler({"key": "a", "adapter": view}) == {"key": "app-a"}

    Raises:
        KeyError: If the plugin has no handler for the hook
    """
    handler = plugin.hook_handlers.get(hook)
    if handler is None:
        available = ", ".join(plugin.hook_handlers)
        raise KeyError(f"Handler '{hook}' was not found. Available handlers: {available}.")
    return handler
