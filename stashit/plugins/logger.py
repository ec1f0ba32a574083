"""
Logger plugin — reports the args of every hook without changing them.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from stashit.core.types import Hook, HookArgs, Plugin

LogFunction = Callable[[str, dict[str, Any]], None]

hook_logger = logging.getLogger("stashit.hooks")


def _default_log(hook: str, args: dict[str, Any]) -> None:
    hook_logger.debug(f"[{hook}] {args}")


def create_logger_plugin(log: LogFunction | None = None) -> Plugin:
    """
    Create a plugin that calls log(hook, args) for all 13 hooks.

    The adapter in args is replaced by its class name.
    Without a log function, records go to the "stashit.hooks" logger
    at DEBUG level.

    Usage:
        calls = []
        stash.register_plugins([create_logger_plugin(lambda hook, args: calls.append(hook))])
    """
    log = log or _default_log

    def make_handler(hook: str):
        async def handler(args: HookArgs) -> None:
            log(hook, {**args, "adapter": args["adapter"].name})

        return handler

    return Plugin({hook: make_handler(hook) for hook in Hook.ALL}, name="logger")
