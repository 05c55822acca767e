"""One-time selection of the storage backend for a process run."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from vault.core.config import Settings
from vault.db.models import create_all
from vault.db.session import engine_for
from vault.repositories.base import RecordBackend
from vault.repositories.json_storage import JsonRecordRepository
from vault.repositories.sql_repository import SQLRecordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendSelection:
    backend: RecordBackend
    remote_available: bool
    reason: str = ""


def _probe_remote(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    create_all(engine)


async def resolve_backend(settings: Settings, file_repository: JsonRecordRepository) -> BackendSelection:
    """
    Probe the SQL database once and pick the backend for this run.

    Never raises: an unconfigured, unreachable or slow database selects the
    file backend, and that choice is final.
    """
    if not settings.remote_configured:
        logger.info("No database URL configured, using file DB %s", settings.data_file)
        return BackendSelection(file_repository, False, "not configured")

    try:
        engine = engine_for(settings.database_url, settings.remote_connect_timeout)
        await asyncio.wait_for(asyncio.to_thread(_probe_remote, engine), timeout=settings.remote_connect_timeout)
    except asyncio.TimeoutError:
        logger.warning(
            "Database not available after %.1fs (using file DB)", settings.remote_connect_timeout
        )
        return BackendSelection(file_repository, False, "timeout")
    except (SQLAlchemyError, OSError, ImportError, RuntimeError) as exc:
        logger.warning("Database not available (using file DB): %s", exc)
        return BackendSelection(file_repository, False, str(exc))

    logger.info("Database connected")
    return BackendSelection(SQLRecordRepository(engine), True, "connected")
