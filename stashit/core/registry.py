"""
stashit Hook Registry — ordered handler lists, one per hook name.

Plugins are registered as a whole; their handlers are appended to the
lists of the hooks they name. Registration order is invocation order.
There is no removal: a registry lives as long as its StashIt instance.
"""

from __future__ import annotations

import logging
from typing import Iterable

from stashit.core.errors import RegistryError
from stashit.core.types import Hook, HookHandler, Plugin

logger = logging.getLogger(__name__)


class HookRegistry:
    """
    Per-dispatcher store of hook handlers.

    Usage:
        registry = HookRegistry()
        registry.register_plugins([prefix_plugin, ttl_plugin])

        for handler in registry.get(Hook.BUILD_KEY):
            ...

    Handlers for the same hook run in the order their plugins were
    registered, across any number of register_plugins() calls.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[HookHandler]] = {hook: [] for hook in Hook.ALL}
        self._plugins: list[str] = []

    def register_plugins(self, plugins: Iterable[Plugin]) -> None:
        """
        Append the handlers of every plugin, in iteration order.

        The whole batch is checked first; if any plugin names an unknown
        hook or a non-callable handler, nothing from the batch is registered.

        Raises:
            RegistryError: Unknown hook name or non-callable handler
        """
        plugins = list(plugins)

        for plugin in plugins:
            for hook, handler in plugin.hook_handlers.items():
                if hook not in self._handlers:
                    available = ", ".join(Hook.ALL)
                    raise RegistryError(
                        f"Unknown hook '{hook}' in plugin '{plugin.name or 'unnamed'}'. "
                        f"Available: {available}"
                    )
                if not callable(handler):
                    raise RegistryError(
                        f"Handler for '{hook}' in plugin '{plugin.name or 'unnamed'}' "
                        f"is not callable"
                    )

        for plugin in plugins:
            for hook, handler in plugin.hook_handlers.items():
                self._handlers[hook].append(handler)
            self._plugins.append(plugin.name)
            logger.debug(
                f"Registered plugin '{plugin.name or 'unnamed'}' "
                f"hooks={list(plugin.hook_handlers)}"
            )

    def get(self, hook: str) -> tuple[HookHandler, ...]:
        """
        Get the handlers registered for a hook, in invocation order.

        An empty tuple means the hook passes its args through unchanged.

        Raises:
            RegistryError: If the hook name is unknown
        """
        handlers = self._handlers.get(hook)
        if handlers is None:
            raise RegistryError(f"Unknown hook '{hook}'")
        return tuple(handlers)

    def count(self, hook: str | None = None) -> int:
        """Number of handlers for one hook, or for all hooks."""
        if hook is None:
            return sum(len(handlers) for handlers in self._handlers.values())
        return len(self.get(hook))

    @property
    def plugins(self) -> list[str]:
        """Names of registered plugins, in registration order."""
        return list(self._plugins)
