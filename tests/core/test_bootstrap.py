"""Tests for building adapters and plugins from config."""

import pytest
from stashit.adapters.memory import MemoryAdapter
from stashit.adapters.sqlite import SqliteAdapter
from stashit.core.bootstrap import create_adapter, create_plugins
from stashit.core.config import StashItConfig
from stashit.core.errors import ConfigError


def test_memory_backend_by_default(config: StashItConfig):
    assert isinstance(create_adapter(config), MemoryAdapter)


def test_sqlite_backend(tmp_path):
    config = StashItConfig(adapter={"backend": "sqlite", "sqlite": {"db_path": str(tmp_path / "s.db")}})
    adapter = create_adapter(config)

    assert isinstance(adapter, SqliteAdapter)
    assert adapter.db_path == tmp_path / "s.db"


def test_no_plugins_by_default(config: StashItConfig):
    assert create_plugins(config) == []


def test_all_plugins_in_order():
    config = StashItConfig(
        plugins={"prefix": "app-", "ttl": 10, "read_only": True, "log_hooks": True}
    )

    names = [plugin.name for plugin in create_plugins(config)]

    assert names == ["prefix_suffix", "ttl", "read_only", "logger"]


def test_suffix_alone_enables_prefix_suffix_plugin():
    config = StashItConfig(plugins={"suffix": "-v1"})
    assert [plugin.name for plugin in create_plugins(config)] == ["prefix_suffix"]


def test_invalid_plugin_option_raises():
    config = StashItConfig(plugins={"ttl": 0})

    with pytest.raises(ConfigError, match="TTL"):
        create_plugins(config)
