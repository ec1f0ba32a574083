"""
Build adapters and plugins from a StashItConfig.

Usage:
    config = StashItConfig.load()
    stash = StashIt(create_adapter(config), create_plugins(config))
"""

from __future__ import annotations

import logging

from stashit.adapters.base import StashItAdapter
from stashit.adapters.memory import MemoryAdapter
from stashit.adapters.sqlite import SqliteAdapter
from stashit.core.config import StashItConfig
from stashit.core.errors import ConfigError
from stashit.core.types import Plugin
from stashit.plugins.logger import create_logger_plugin
from stashit.plugins.prefix_suffix import create_prefix_suffix_plugin
from stashit.plugins.read_only import create_read_only_plugin
from stashit.plugins.ttl import create_ttl_plugin

logger = logging.getLogger(__name__)


def create_adapter(config: StashItConfig) -> StashItAdapter:
    """Create the adapter selected by config.adapter.backend."""
    backend = config.adapter.backend
    if backend == "memory":
        return MemoryAdapter()
    if backend == "sqlite":
        return SqliteAdapter(config.adapter.sqlite)
    raise ConfigError(f"Unknown backend '{backend}'")


def create_plugins(config: StashItConfig) -> list[Plugin]:
    """
    Create the built-in plugins enabled in config.plugins.

    Order: prefix/suffix, ttl, read-only, logger. The logger comes last
    so it sees the args the other plugins produced.
    """
    options = config.plugins
    plugins: list[Plugin] = []

    if options.prefix or options.suffix:
        plugins.append(create_prefix_suffix_plugin(prefix=options.prefix, suffix=options.suffix))
    if options.ttl is not None:
        plugins.append(create_ttl_plugin(options.ttl))
    if options.read_only:
        plugins.append(create_read_only_plugin())
    if options.log_hooks:
        plugins.append(create_logger_plugin())

    logger.debug(f"Configured plugins: {[plugin.name for plugin in plugins]}")
    return plugins
