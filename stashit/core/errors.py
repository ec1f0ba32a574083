"""
stashit exception hierarchy.

Every error raised by stashit itself inherits from StashItError.
Missing items are never errors: they are reported with sentinels
(None / False) by the adapters.

Usage:
    try:
        await stash.set_item("my key", "value")
    except InvalidKeyError as e:
        # Key has characters outside [A-Za-z0-9_-]
    except StashItError as e:
        # Any stashit error
"""


class StashItError(Exception):
    """Base exception for all stashit errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ━━━ Core Errors ━━━


class ConfigError(StashItError):
    """Configuration or plugin options are invalid, missing, or malformed."""

    pass


class RegistryError(StashItError):
    """Unknown hook name or invalid hook handler."""

    pass


# ━━━ Adapter Errors ━━━


class InvalidKeyError(StashItError):
    """Key contains characters outside [A-Za-z0-9_-] or is empty."""

    def __init__(self, message: str, key: object = "", details: dict | None = None):
        self.key = key
        super().__init__(message, details)


class StorageError(StashItError):
    """Storage backend failure: missing table, closed connection and the like."""

    pass


# ━━━ Plugin Errors ━━━


class PluginError(StashItError):
    """A plugin refused the operation."""

    pass


class ReadOnlyError(PluginError):
    """Mutating operation attempted while the read-only plugin is active."""

    pass


class ReservedExtraError(PluginError):
    """Extra contains a field reserved by a plugin."""

    def __init__(self, message: str, field: str = "", details: dict | None = None):
        self.field = field
        super().__init__(message, details)
