"""Persistence layer for generation progress checkpoints."""

from __future__ import annotations

import os
from typing import Optional

from ..config import CopyflowConfig, load_config
from .inmemory import InMemoryProgressRepository
from .repository import ProgressRepository
from .sqlite import SQLiteProgressRepository

try:  # pragma: no cover - optional dependency
    from .postgres import PostgresProgressRepository
except ImportError:  # pragma: no cover - optional dependency
    PostgresProgressRepository = None  # type: ignore

_repository_instance: ProgressRepository | None = None


def get_repository(
    database_url: Optional[str] = None, config: Optional[CopyflowConfig] = None
) -> ProgressRepository:
    """Factory function to obtain a progress repository.

    The repository backend is selected based on ``database_url`` which can be
    provided explicitly, via environment variable ``COPYFLOW_DATABASE_URL`` or
    ``DATABASE_URL``, or from loaded configuration. When no database is
    configured, an in-memory repository is returned.
    """

    global _repository_instance
    if _repository_instance is not None and database_url is None and config is None:
        return _repository_instance

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("COPYFLOW_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or config.database_url
    )

    if not database_url:
        _repository_instance = InMemoryProgressRepository()
        return _repository_instance

    if database_url.startswith("sqlite://"):
        path = database_url.replace("sqlite://", "", 1)
        _repository_instance = SQLiteProgressRepository(path)
    elif database_url.startswith("postgres://") or database_url.startswith(
        "postgresql://"
    ):
        if PostgresProgressRepository is None:
            raise RuntimeError("Postgres support not available; install copyflow[postgres]")
        _repository_instance = PostgresProgressRepository(database_url)
    else:
        raise ValueError(f"Unsupported database backend: {database_url}")

    return _repository_instance


__all__ = [
    "ProgressRepository",
    "InMemoryProgressRepository",
    "SQLiteProgressRepository",
    "PostgresProgressRepository",
    "get_repository",
]
