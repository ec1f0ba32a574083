"""
SQLite adapter.

Uses aiosqlite for async SQLite access.
Values and extras are stored as JSON text in configurable columns.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import aiosqlite
from pydantic import BaseModel, Field, ValidationError

from stashit.adapters.base import StashItAdapter
from stashit.core.errors import ConfigError, StorageError
from stashit.core.types import Extra, GetExtraResult, GetItemResult, Item, Key, SetExtraResult, Value

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"


class SqliteAdapterConfig(BaseModel):
    """SQLite adapter configuration."""

    db_path: str = "~/.stashit/stash.db"
    table_name: str = Field(default="items", pattern=IDENTIFIER_PATTERN)
    key_column: str = Field(default="key", pattern=IDENTIFIER_PATTERN)
    value_column: str = Field(default="value", pattern=IDENTIFIER_PATTERN)
    extra_column: str = Field(default="extra", pattern=IDENTIFIER_PATTERN)
    create_if_missing: bool = False

    model_config = {"extra": "forbid"}


class SqliteAdapter(StashItAdapter):
    """
    SQLite-based item storage.

    The database is opened by connect() and closed by disconnect();
    StashIt does both around every operation. Unless create_if_missing
    is set, the database file and table must already exist.

    Usage:
        adapter = SqliteAdapter(db_path="~/.stashit/stash.db", create_if_missing=True)
        await adapter.connect()
        await adapter.set_item("user-name", "Alex")
        item = await adapter.get_item("user-name")  # Item(key="user-name", value="Alex", extra={})
        await adapter.disconnect()
    """

    def __init__(self, config: SqliteAdapterConfig | None = None, **options: object) -> None:
        try:
            self._config = config or SqliteAdapterConfig(**options)
        except ValidationError as e:
            raise ConfigError(f"Invalid SQLite adapter options: {e}") from e

        self._db_path = Path(self._config.db_path).expanduser()
        self._table = self._config.table_name
        self._key = self._config.key_column
        self._value = self._config.value_column
        self._extra = self._config.extra_column
        self._db: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    @property
    def db_path(self) -> Path:
        return self._db_path

    async def connect(self) -> None:
        """Open the database (and create file and table when allowed)."""
        # Overlapping calls share one connection
        async with self._connect_lock:
            if self._db is not None:
                return

            try:
                if self._config.create_if_missing:
                    self._db_path.parent.mkdir(parents=True, exist_ok=True)
                    self._db = await aiosqlite.connect(str(self._db_path))
                else:
                    # mode=rw refuses to create a missing file
                    uri = f"{self._db_path.resolve().as_uri()}?mode=rw"
                    self._db = await aiosqlite.connect(uri, uri=True)
            except Exception as e:
                raise StorageError(f"Failed to open SQLite at {self._db_path}: {e}") from e

            if self._config.create_if_missing:
                await self.create_table()

        logger.debug(f"SQLite connected at {self._db_path}")

    async def disconnect(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None
            logger.debug(f"SQLite disconnected from {self._db_path}")

    async def create_table(self) -> None:
        """Create the items table with the configured names, if missing."""
        db = self._ensure_db()
        try:
            await db.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self._table} (
                    {self._key} TEXT PRIMARY KEY,
                    {self._value} TEXT NOT NULL,
                    {self._extra} TEXT NOT NULL DEFAULT '{{}}'
                )
                """
            )
            await db.commit()
        except Exception as e:
            raise StorageError(f"Failed to create table '{self._table}': {e}") from e

    def _ensure_db(self) -> aiosqlite.Connection:
        """Return the open connection."""
        if self._db is None:
            raise StorageError(
                f"SQLite adapter for {self._db_path} is not connected. Call connect() first."
            )
        return self._db

    async def set_item(self, key: Key, value: Value, extra: Extra | None = None) -> Item:
        self.validate_key(key)
        db = self._ensure_db()
        try:
            value_text = json.dumps(value)
            extra_text = json.dumps(extra or {})
            # The key column is not required to be unique, so no upsert
            if await self._exists(db, key):
                await db.execute(
                    f'UPDATE {self._table} SET {self._value} = ?, {self._extra} = ? '
                    f'WHERE {self._key} = ?',
                    (value_text, extra_text, key),
                )
            else:
                await db.execute(
                    f'INSERT INTO {self._table} ({self._key}, {self._value}, {self._extra}) '
                    f"VALUES (?, ?, ?)",
                    (key, value_text, extra_text),
                )
            await db.commit()
        except Exception as e:
            raise StorageError(f"Failed to set item '{key}': {e}") from e

        # Decoded copies, so the result never aliases the caller's objects
        return Item(key=key, value=json.loads(value_text), extra=json.loads(extra_text))

    async def get_item(self, key: Key) -> GetItemResult:
        db = self._ensure_db()
        try:
            async with db.execute(
                f'SELECT {self._value}, {self._extra} FROM {self._table} '
                f'WHERE {self._key} = ? LIMIT 1',
                (key,),
            ) as cursor:
                row = await cursor.fetchone()
        except Exception as e:
            raise StorageError(f"Failed to get item '{key}': {e}") from e

        if row is None:
            return None
        return Item(key=key, value=json.loads(row[0]), extra=json.loads(row[1]))

    async def has_item(self, key: Key) -> bool:
        db = self._ensure_db()
        try:
            return await self._exists(db, key)
        except Exception as e:
            raise StorageError(f"Failed to check item '{key}': {e}") from e

    async def remove_item(self, key: Key) -> bool:
        self.validate_key(key)
        db = self._ensure_db()
        try:
            cursor = await db.execute(
                f'DELETE FROM {self._table} WHERE {self._key} = ?', (key,)
            )
            await db.commit()
            return cursor.rowcount > 0
        except Exception as e:
            raise StorageError(f"Failed to remove item '{key}': {e}") from e

    async def set_extra(self, key: Key, extra: Extra) -> SetExtraResult:
        self.validate_key(key)
        db = self._ensure_db()
        try:
            extra_text = json.dumps(extra)
            cursor = await db.execute(
                f'UPDATE {self._table} SET {self._extra} = ? WHERE {self._key} = ?',
                (extra_text, key),
            )
            await db.commit()
        except Exception as e:
            raise StorageError(f"Failed to set extra of '{key}': {e}") from e

        if cursor.rowcount == 0:
            return False
        return json.loads(extra_text)

    async def get_extra(self, key: Key) -> GetExtraResult:
        db = self._ensure_db()
        try:
            async with db.execute(
                f'SELECT {self._extra} FROM {self._table} WHERE {self._key} = ? LIMIT 1',
                (key,),
            ) as cursor:
                row = await cursor.fetchone()
        except Exception as e:
            raise StorageError(f"Failed to get extra of '{key}': {e}") from e

        return json.loads(row[0]) if row is not None else None

    async def _exists(self, db: aiosqlite.Connection, key: Key) -> bool:
        async with db.execute(
            f'SELECT 1 FROM {self._table} WHERE {self._key} = ? LIMIT 1', (key,)
        ) as cursor:
            return await cursor.fetchone() is not None
