"""In-memory implementation of the progress repository."""

from __future__ import annotations

from typing import Dict

from .repository import ProgressRepository


class InMemoryProgressRepository(ProgressRepository):
    """Store checkpoints in local memory.

    Useful for tests or when no database is configured. Data is not
    persisted across process restarts.
    """

    def __init__(self) -> None:
        self._payloads: Dict[str, str] = {}

    async def save(self, document_id: str, payload: str) -> None:
        self._payloads[document_id] = payload

    async def load(self, document_id: str) -> str | None:
        return self._payloads.get(document_id)

    async def delete(self, document_id: str) -> bool:
        return self._payloads.pop(document_id, None) is not None

    async def list_documents(self) -> list[str]:
        return sorted(self._payloads)
