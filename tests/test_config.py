from __future__ import annotations

import dataclasses
from pathlib import Path

import pytest

from vault.core import config as core_config


@pytest.fixture()
def fresh_settings():
    core_config.get_settings.cache_clear()
    yield core_config.get_settings
    core_config.get_settings.cache_clear()


def test_settings_read_from_environment(monkeypatch, fresh_settings):
    monkeypatch.setenv("VAULT_DATA_FILE", "/tmp/data/vault.json")
    monkeypatch.setenv("VAULT_BACKUP_DIR", "/tmp/data/backups")
    monkeypatch.setenv("VAULT_EXPORT_FILE", "/tmp/data/export.txt")
    monkeypatch.setenv("VAULT_DATABASE_URL", " sqlite:///x.db ")
    monkeypatch.setenv("VAULT_REMOTE_TIMEOUT", "5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = fresh_settings()

    assert settings.data_file == Path("/tmp/data/vault.json")
    assert settings.backup_dir == Path("/tmp/data/backups")
    assert settings.export_file == Path("/tmp/data/export.txt")
    assert settings.database_url == "sqlite:///x.db"
    assert settings.remote_configured is True
    assert settings.remote_connect_timeout == 5.0
    assert settings.log_level == "DEBUG"
    assert {f.name for f in dataclasses.fields(settings)} == {
        "data_file",
        "backup_dir",
        "export_file",
        "database_url",
        "remote_connect_timeout",
        "log_level",
    }


@pytest.mark.parametrize("raw", ["abc", "0", "-2"])
def test_bad_timeout_falls_back_to_default(monkeypatch, fresh_settings, raw):
    monkeypatch.setenv("VAULT_REMOTE_TIMEOUT", raw)
    assert fresh_settings().remote_connect_timeout == 3.0


def test_database_url_falls_back_to_generic_variable(monkeypatch, fresh_settings):
    monkeypatch.delenv("VAULT_DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", "sqlite:///generic.db")
    assert fresh_settings().database_url == "sqlite:///generic.db"
