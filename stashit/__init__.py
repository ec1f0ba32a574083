"""
stashit — one key/value/extra API over pluggable storage.

Public API:
    from stashit import StashIt, MemoryAdapter, Plugin, Hook
"""

__version__ = "0.1.0"

# Core
from stashit.core.stash import StashIt
from stashit.core.config import StashItConfig
from stashit.core.registry import HookRegistry
from stashit.core.types import Hook, Item, Plugin
from stashit.core.errors import (
    ConfigError,
    InvalidKeyError,
    PluginError,
    ReadOnlyError,
    RegistryError,
    ReservedExtraError,
    StashItError,
    StorageError,
)

# Adapters
from stashit.adapters.base import AdapterView, StashItAdapter
from stashit.adapters.memory import MemoryAdapter
from stashit.adapters.sqlite import SqliteAdapter, SqliteAdapterConfig

# Plugins
from stashit.plugins.logger import create_logger_plugin
from stashit.plugins.prefix_suffix import create_prefix_suffix_plugin
from stashit.plugins.read_only import create_read_only_plugin
from stashit.plugins.ttl import TTL_EXTRA_FIELD, create_ttl_plugin

__all__ = [
    # Core
    "StashIt",
    "StashItConfig",
    "HookRegistry",
    "Hook",
    "Item",
    "Plugin",
    # Errors
    "StashItError",
    "ConfigError",
    "RegistryError",
    "InvalidKeyError",
    "StorageError",
    "PluginError",
    "ReadOnlyError",
    "ReservedExtraError",
    # Adapters
    "StashItAdapter",
    "AdapterView",
    "MemoryAdapter",
    "SqliteAdapter",
    "SqliteAdapterConfig",
    # Plugins
    "create_prefix_suffix_plugin",
    "create_read_only_plugin",
    "create_ttl_plugin",
    "create_logger_plugin",
    "TTL_EXTRA_FIELD",
]
