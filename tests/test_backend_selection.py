from __future__ import annotations

import dataclasses
import logging
import time

import pytest

from vault.db import session as db_session
from vault.repositories.json_storage import JsonRecordRepository
from vault.repositories.sql_repository import SQLRecordRepository
from vault.services import backend as backend_module
from vault.services.backend import resolve_backend
from vault.services.vault_service import create_vault_service


@pytest.fixture()
def file_repo(file_store):
    return JsonRecordRepository(file_store)


@pytest.fixture()
def no_env_database(monkeypatch):
    """Nenhuma URL no ambiente: só o Settings passado pode apontar o banco."""
    monkeypatch.delenv("VAULT_DATABASE_URL", raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    db_session.engine_for.cache_clear()
    yield
    db_session.engine_for.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.mark.asyncio
async def test_unconfigured_database_selects_file_backend(settings, file_repo):
    selection = await resolve_backend(settings, file_repo)
    assert selection.backend is file_repo
    assert selection.remote_available is False


@pytest.mark.asyncio
async def test_reachable_database_selects_sql_backend(temp_db, settings, file_repo):
    remote = dataclasses.replace(settings, database_url=f"sqlite:///{temp_db}")
    selection = await resolve_backend(remote, file_repo)
    assert selection.remote_available is True
    assert isinstance(selection.backend, SQLRecordRepository)


@pytest.mark.asyncio
async def test_unreachable_database_falls_back_and_logs(no_env_database, tmp_path, settings, file_repo, caplog):
    url = f"sqlite:///{tmp_path / 'missing' / 'dir' / 'vault.db'}"
    remote = dataclasses.replace(settings, database_url=url)
    with caplog.at_level(logging.WARNING, logger="vault.services.backend"):
        selection = await resolve_backend(remote, file_repo)
    assert selection.backend is file_repo
    assert selection.remote_available is False
    assert "using file DB" in caplog.text
    assert "must be configured" not in caplog.text


@pytest.mark.asyncio
async def test_slow_probe_is_bounded_by_timeout(no_env_database, monkeypatch, settings, file_repo):
    monkeypatch.setattr(backend_module, "_probe_remote", lambda engine: time.sleep(0.5))
    remote = dataclasses.replace(settings, database_url="sqlite://", remote_connect_timeout=0.05)
    selection = await resolve_backend(remote, file_repo)
    assert selection.remote_available is False
    assert selection.reason == "timeout"


@pytest.mark.asyncio
async def test_service_uses_database_from_passed_settings(no_env_database, tmp_path, settings):
    db_file = tmp_path / "remote.db"
    remote = dataclasses.replace(settings, database_url=f"sqlite:///{db_file}")

    service = await create_vault_service(remote)
    assert service.remote_available is True
    record = await service.add_record("remote", "row")

    assert db_file.exists()
    assert [r.id for r in await service.list_records()] == [record.id]
    assert not settings.data_file.exists()
    other = SQLRecordRepository(db_session.engine_for(remote.database_url, remote.remote_connect_timeout))
    assert [r.name for r in other.find_all()] == ["remote"]
