"""SQLite prompt store.

Provides persistent prompt storage in a SQLite key/value table.
Uses aiosqlite for async access.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from ..config import PROMPT_LIBRARY_SLOT
from ..errors import PromptStoreError
from .base import PromptStore
from .models import SavedPrompt, dump_prompts, parse_prompts


class SQLitePromptStore(PromptStore):
    """SQLite-backed prompt store.

    One row per slot; the value column holds the serialized prompt list.
    """

    def __init__(
        self,
        path: str | Path = "./prompt_library.db",
        slot: str = PROMPT_LIBRARY_SLOT
    ):
        self._db_path = Path(path)
        self._slot = slot
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Initialize database connection and schema."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = await aiosqlite.connect(self._db_path)
            await self._connection.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            await self._connection.commit()
        except (OSError, aiosqlite.Error) as e:
            raise PromptStoreError(f"Cannot open prompt library database {self._db_path}: {e}") from e

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise PromptStoreError("Prompt library database is not connected")
        return self._connection

    async def load_all(self) -> list[SavedPrompt]:
        connection = self._require_connection()
        try:
            async with connection.execute(
                "SELECT value FROM kv_store WHERE key = ?",
                (self._slot,)
            ) as cursor:
                row = await cursor.fetchone()
            return parse_prompts(row[0]) if row else []
        except (aiosqlite.Error, ValidationError) as e:
            raise PromptStoreError(f"Cannot read prompt library: {e}") from e

    async def save_all(self, prompts: list[SavedPrompt]) -> None:
        connection = self._require_connection()
        try:
            await connection.execute("""
                INSERT INTO kv_store (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (self._slot, dump_prompts(prompts), datetime.now(timezone.utc).isoformat()))
            await connection.commit()
        except aiosqlite.Error as e:
            raise PromptStoreError(f"Cannot write prompt library: {e}") from e

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
