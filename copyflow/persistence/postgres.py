"""PostgreSQL implementation of the progress repository."""

from __future__ import annotations

import asyncpg

from .repository import ProgressRepository


class PostgresProgressRepository(ProgressRepository):
    """Persist checkpoints using PostgreSQL."""

    def __init__(self, dsn: str):
        self._dsn = dsn
        self._initialized = False

    async def _connect(self) -> asyncpg.Connection:
        conn = await asyncpg.connect(self._dsn)
        if not self._initialized:
            await self._ensure_schema(conn)
            self._initialized = True
        return conn

    async def _ensure_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS generation_progress (
                document_id TEXT PRIMARY KEY,
                payload JSONB NOT NULL,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
            )
            """
        )

    # ------------------------------------------------------------------
    async def save(self, document_id: str, payload: str) -> None:
        conn = await self._connect()
        try:
            await conn.execute(
                """
                INSERT INTO generation_progress (document_id, payload, updated_at)
                VALUES ($1, $2::jsonb, now())
                ON CONFLICT (document_id) DO UPDATE
                SET payload = EXCLUDED.payload, updated_at = EXCLUDED.updated_at
                """,
                document_id,
                payload,
            )
        finally:
            await conn.close()

    async def load(self, document_id: str) -> str | None:
        conn = await self._connect()
        try:
            row = await conn.fetchrow(
                "SELECT payload::text AS payload FROM generation_progress WHERE document_id = $1",
                document_id,
            )
        finally:
            await conn.close()
        return row["payload"] if row else None

    async def delete(self, document_id: str) -> bool:
        conn = await self._connect()
        try:
            status = await conn.execute(
                "DELETE FROM generation_progress WHERE document_id = $1",
                document_id,
            )
        finally:
            await conn.close()
        # asyncpg returns the command tag, e.g. "DELETE 1"
        return status.split()[-1] != "0"

    async def list_documents(self) -> list[str]:
        conn = await self._connect()
        try:
            rows = await conn.fetch(
                "SELECT document_id FROM generation_progress ORDER BY document_id"
            )
        finally:
            await conn.close()
        return [row["document_id"] for row in rows]
