"""
stashit Configuration — loads and merges config from multiple sources.

Precedence (highest to lowest):
1. Explicit overrides (passed in code)
2. Environment variables (STASHIT_*)
3. Project config (./stashit.toml)
4. User config (~/.stashit/config.toml)
5. Defaults (hardcoded)

Environment variable mapping:
    STASHIT_BACKEND → adapter.backend
    STASHIT_SQLITE_PATH → adapter.sqlite.db_path
    STASHIT_PREFIX → plugins.prefix
    STASHIT_TTL → plugins.ttl
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field

from stashit.adapters.sqlite import SqliteAdapterConfig
from stashit.core.errors import ConfigError

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Config Sub-Models
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class AdapterConfig(BaseModel):
    """Which backend to use, and its options."""

    backend: Literal["memory", "sqlite"] = "memory"
    sqlite: SqliteAdapterConfig = Field(default_factory=SqliteAdapterConfig)


class PluginsConfig(BaseModel):
    """Built-in plugins to register. Unset means not registered."""

    prefix: str | None = None
    suffix: str | None = None
    ttl: int | None = None  # seconds
    read_only: bool = False
    log_hooks: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "WARNING"
    log_dir: str | None = None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Main Config
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


class StashItConfig(BaseModel):
    """Root configuration for stashit."""

    adapter: AdapterConfig = Field(default_factory=AdapterConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @staticmethod
    def load(
        overrides: dict[str, Any] | None = None,
        project_path: Path | None = None,
        user_path: Path | None = None,
    ) -> StashItConfig:
        """
        Load configuration from all sources and merge.

        Precedence: overrides > env vars > project toml > user toml > defaults
        """
        merged: dict[str, Any] = {}

        # Layer 1: User config (~/.stashit/config.toml)
        user_config_path = user_path or Path.home() / ".stashit" / "config.toml"
        if user_config_path.exists():
            _deep_merge(merged, _load_toml(user_config_path))

        # Layer 2: Project config (./stashit.toml)
        project_config_path = project_path or Path.cwd() / "stashit.toml"
        if project_config_path.exists():
            _deep_merge(merged, _load_toml(project_config_path))

        # Layer 3: Environment variables
        _deep_merge(merged, _load_from_env())

        # Layer 4: Explicit overrides
        if overrides:
            _deep_merge(merged, overrides)

        _substitute_env_vars(merged)

        try:
            return StashItConfig(**merged)
        except Exception as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Internal Helpers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except Exception as e:
        raise ConfigError(f"Failed to load config from {path}: {e}") from e


def _load_from_env() -> dict[str, Any]:
    """Load configuration from STASHIT_* environment variables."""
    result: dict[str, Any] = {}

    env_mapping: dict[str, tuple[str, ...]] = {
        "STASHIT_BACKEND": ("adapter", "backend"),
        "STASHIT_SQLITE_PATH": ("adapter", "sqlite", "db_path"),
        "STASHIT_SQLITE_TABLE": ("adapter", "sqlite", "table_name"),
        "STASHIT_PREFIX": ("plugins", "prefix"),
        "STASHIT_SUFFIX": ("plugins", "suffix"),
        "STASHIT_TTL": ("plugins", "ttl"),
        "STASHIT_READ_ONLY": ("plugins", "read_only"),
        "STASHIT_LOG_HOOKS": ("plugins", "log_hooks"),
        "STASHIT_LOG_LEVEL": ("logging", "level"),
    }

    for env_var, path in env_mapping.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        section = result
        for name in path[:-1]:
            section = section.setdefault(name, {})
        # Paths, names and affixes stay strings
        if path[-1] in ("ttl", "read_only", "log_hooks"):
            section[path[-1]] = _convert_value(value)
        else:
            section[path[-1]] = value

    return result


def _convert_value(value: str) -> Any:
    """Convert string value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False
    # Integer
    try:
        return int(value)
    except ValueError:
        pass
    # String
    return value


def _deep_merge(base: dict, override: dict) -> None:
    """Deep merge override into base (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _substitute_env_vars(data: dict) -> None:
    """Recursively substitute ${ENV_VAR} patterns in string values."""
    pattern = re.compile(r"\$\{([^}]+)\}")

    def substitute(value: str) -> str:
        return pattern.sub(lambda match: os.environ.get(match.group(1), ""), value)

    for key, value in data.items():
        if isinstance(value, dict):
            _substitute_env_vars(value)
        elif isinstance(value, str):
            data[key] = substitute(value)
        elif isinstance(value, list):
            data[key] = [substitute(item) if isinstance(item, str) else item for item in value]
