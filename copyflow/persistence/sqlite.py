"""SQLite implementation of the progress repository."""

from __future__ import annotations

import asyncio
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .repository import ProgressRepository


class SQLiteProgressRepository(ProgressRepository):
    """Persist checkpoints using SQLite."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._ensure_schema()

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        cur = self._conn.cursor()
        cur.execute(
            """
            CREATE TABLE IF NOT EXISTS generation_progress (
                document_id TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        cur = self._conn.cursor()
        cur.execute(query, params)
        self._conn.commit()
        return cur.rowcount

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchone()

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        cur = self._conn.cursor()
        cur.execute(query, params)
        return cur.fetchall()

    # ------------------------------------------------------------------
    # Repository API
    async def save(self, document_id: str, payload: str) -> None:
        await asyncio.to_thread(
            self._execute,
            """
            INSERT INTO generation_progress (document_id, payload, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(document_id) DO UPDATE
            SET payload = excluded.payload, updated_at = excluded.updated_at
            """,
            document_id,
            payload,
            datetime.now(timezone.utc).isoformat(),
        )

    async def load(self, document_id: str) -> str | None:
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT payload FROM generation_progress WHERE document_id = ?",
            document_id,
        )
        return row["payload"] if row else None

    async def delete(self, document_id: str) -> bool:
        deleted = await asyncio.to_thread(
            self._execute,
            "DELETE FROM generation_progress WHERE document_id = ?",
            document_id,
        )
        return deleted > 0

    async def list_documents(self) -> list[str]:
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT document_id FROM generation_progress ORDER BY document_id",
        )
        return [row["document_id"] for row in rows]

    def close(self) -> None:
        self._conn.close()
