"""Repository abstraction for generation progress persistence."""

from __future__ import annotations

from typing import Protocol


class ProgressRepository(Protocol):
    """Protocol for checkpoint storage backends.

    Payloads are opaque serialized ``GenerationProgress`` documents keyed by
    document id. Writes replace the stored payload (last writer wins).
    """

    async def save(self, document_id: str, payload: str) -> None:
        """Persist ``payload`` for ``document_id``."""

    async def load(self, document_id: str) -> str | None:
        """Return the stored payload, or ``None`` when there is none."""

    async def delete(self, document_id: str) -> bool:
        """Remove the stored payload; returns whether one existed."""

    async def list_documents(self) -> list[str]:
        """Return every document id with stored progress."""
