"""Record storage backed by SQLAlchemy (the optional remote backend)."""
from __future__ import annotations

from typing import Mapping, Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine

from vault.db.models import RecordEntity
from vault.db.session import get_session
from vault.domain.records import Record, parse_timestamp, utcnow


def _entity_to_record(entity: RecordEntity) -> Record:
    return Record(
        id=int(entity.id),
        name=entity.name,
        value=entity.value,
        created_at=parse_timestamp(entity.created_at),
    )


class SQLRecordRepository:
    """RecordBackend wrapping the SQLAlchemy session. Ids come from the database."""

    name = "sql"

    def __init__(self, engine: Optional[Engine] = None) -> None:
        # None means the engine configured through get_settings()
        self.engine = engine

    def insert(self, name: str, value: str) -> Record:
        entity = RecordEntity(name=name, value=value, created_at=utcnow())
        with get_session(self.engine) as session:
            session.add(entity)
            session.commit()
            session.refresh(entity)
            return _entity_to_record(entity)

    def find_all(self) -> list[Record]:
        with get_session(self.engine) as session:
            stmt = select(RecordEntity).order_by(RecordEntity.created_at, RecordEntity.id)
            return [_entity_to_record(e) for e in session.execute(stmt).scalars().all()]

    def find_and_update(self, record_id: int, changes: Mapping[str, str]) -> Optional[Record]:
        with get_session(self.engine) as session:
            entity = session.get(RecordEntity, record_id)
            if not entity:
                return None
            if "name" in changes:
                entity.name = changes["name"]
            if "value" in changes:
                entity.value = changes["value"]
            session.commit()
            session.refresh(entity)
            return _entity_to_record(entity)

    def find_and_delete(self, record_id: int) -> Optional[Record]:
        with get_session(self.engine) as session:
            entity = session.get(RecordEntity, record_id)
            if not entity:
                return None
            record = _entity_to_record(entity)
            session.delete(entity)
            session.commit()
            return record
