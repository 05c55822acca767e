"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from vault.core.config import get_settings

Base = declarative_base()


def _connect_args(url: str, timeout: float) -> dict:
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        return {"timeout": timeout}
    if backend in {"postgresql", "mysql"}:
        return {"connect_timeout": max(1, int(timeout))}
    return {}


@lru_cache
def engine_for(url: str, timeout: float = 3.0) -> Engine:
    """One engine per (url, timeout); the probe and the repository share it."""
    url = (url or "").strip()
    if not url:
        raise RuntimeError("VAULT_DATABASE_URL must be configured to use the SQL backend.")
    return create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        connect_args=_connect_args(url, timeout),
    )


@lru_cache
def get_engine() -> Engine:
    settings = get_settings()
    return engine_for(settings.database_url, settings.remote_connect_timeout)


@lru_cache
def _get_sessionmaker(engine: Engine | None = None):
    return sessionmaker(bind=engine or get_engine(), autoflush=False, autocommit=False, future=True)


@contextmanager
def get_session(engine: Engine | None = None) -> Session:
    session: Session = _get_sessionmaker(engine)()
    try:
        yield session
    finally:
        session.close()
