"""
Configuration helpers for the record vault.

Settings are read once from the environment (and an optional ``.env`` file)
so that repositories/services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    data_file: Path
    backup_dir: Path
    export_file: Path
    database_url: str
    remote_connect_timeout: float
    log_level: str

    @property
    def remote_configured(self) -> bool:
        return bool(self.database_url)


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _float(value: str | None, default: float) -> float:
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            return default
        return parsed if parsed > 0 else default

    database_url = os.getenv("VAULT_DATABASE_URL") or os.getenv("DATABASE_URL") or ""

    return Settings(
        data_file=Path(os.getenv("VAULT_DATA_FILE") or "vault.json"),
        backup_dir=Path(os.getenv("VAULT_BACKUP_DIR") or "backups"),
        export_file=Path(os.getenv("VAULT_EXPORT_FILE") or "export.txt"),
        database_url=database_url.strip(),
        remote_connect_timeout=_float(os.getenv("VAULT_REMOTE_TIMEOUT"), 3.0),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
