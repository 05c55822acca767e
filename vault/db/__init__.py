"""Database helpers (engine/session export)."""

from .session import Base, engine_for, get_engine, get_session

__all__ = ["Base", "engine_for", "get_engine", "get_session"]
