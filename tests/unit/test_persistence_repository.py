import pytest

import copyflow.persistence as persistence
from copyflow.config import CopyflowConfig
from copyflow.persistence import (
    InMemoryProgressRepository,
    SQLiteProgressRepository,
    get_repository,
)


@pytest.mark.asyncio
@pytest.mark.parametrize("backend", ["inmemory", "sqlite"])
async def test_repository_crud(tmp_path, backend):
    if backend == "sqlite":
        repo = SQLiteProgressRepository(tmp_path / "progress.db")
    else:
        repo = InMemoryProgressRepository()

    assert await repo.load("doc-1") is None
    await repo.save("doc-1", '{"v": 1}')
    await repo.save("doc-2", '{"v": 2}')
    await repo.save("doc-1", '{"v": 3}')

    assert await repo.load("doc-1") == '{"v": 3}'
    assert await repo.list_documents() == ["doc-1", "doc-2"]

    assert await repo.delete("doc-1") is True
    assert await repo.delete("doc-1") is False
    assert await repo.load("doc-1") is None
    assert await repo.list_documents() == ["doc-2"]


@pytest.mark.asyncio
async def test_sqlite_repository_survives_reopen(tmp_path):
    db_path = tmp_path / "progress.db"
    repo = SQLiteProgressRepository(db_path)
    await repo.save("doc-1", '{"v": 1}')
    repo.close()

    reopened = SQLiteProgressRepository(db_path)
    assert await reopened.load("doc-1") == '{"v": 1}'


def test_get_repository_selects_backend(tmp_path, monkeypatch):
    monkeypatch.delenv("COPYFLOW_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setattr(persistence, "_repository_instance", None)

    repo = get_repository(config=CopyflowConfig())
    assert isinstance(repo, InMemoryProgressRepository)

    sqlite_repo = get_repository(database_url=f"sqlite://{tmp_path / 'p.db'}")
    assert isinstance(sqlite_repo, SQLiteProgressRepository)
    assert get_repository() is sqlite_repo

    with pytest.raises(ValueError):
        get_repository(database_url="mysql://localhost/db")


def test_get_repository_reads_env(tmp_path, monkeypatch):
    monkeypatch.setattr(persistence, "_repository_instance", None)
    monkeypatch.setenv("COPYFLOW_DATABASE_URL", f"sqlite://{tmp_path / 'env.db'}")

    repo = get_repository(config=CopyflowConfig())
    assert isinstance(repo, SQLiteProgressRepository)
    assert repo.db_path == str(tmp_path / "env.db")
