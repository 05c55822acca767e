"""Shared fixtures: temporary data paths and a temporary SQLite database."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote vault seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vault.core import config as core_config  # noqa: E402
from vault.core.config import Settings  # noqa: E402
from vault.db import models  # noqa: E402
from vault.db import session as db_session  # noqa: E402
from vault.repositories.json_storage import FileStore, JsonRecordRepository  # noqa: E402
from vault.repositories.sql_repository import SQLRecordRepository  # noqa: E402
from vault.services.backend import BackendSelection  # noqa: E402
from vault.services.events import RecordEvents  # noqa: E402
from vault.services.vault_service import VaultService  # noqa: E402


def _clear_caches() -> None:
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]
    db_session.engine_for.cache_clear()


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        data_file=tmp_path / "vault.json",
        backup_dir=tmp_path / "backups",
        export_file=tmp_path / "export.txt",
        database_url="",
        remote_connect_timeout=1.0,
        log_level="DEBUG",
    )


@pytest.fixture()
def file_store(settings) -> FileStore:
    return FileStore(settings.data_file)


@pytest.fixture()
def file_service(settings, file_store) -> VaultService:
    selection = BackendSelection(JsonRecordRepository(file_store), False, "test")
    return VaultService(selection, file_store, RecordEvents(), settings)


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Configura um SQLite temporário e garante teardown completo."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("VAULT_DATABASE_URL", f"sqlite:///{db_file}")
    # limpa caches para forçar re-leitura de envs
    _clear_caches()

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    try:
        models.Base.metadata.drop_all(bind=engine)
    except Exception:
        pass
    try:
        engine.dispose()
    except Exception:
        pass
    _clear_caches()


@pytest.fixture()
def sql_service(temp_db, settings, file_store) -> VaultService:
    selection = BackendSelection(SQLRecordRepository(), True, "test")
    return VaultService(selection, file_store, RecordEvents(), settings)
