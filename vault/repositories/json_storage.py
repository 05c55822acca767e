"""
JSON-file persistence adapter.

The whole record set lives in one JSON array on disk. Every read loads the
full file and every write replaces it; queries filter in memory.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional
import json
import os

from vault.domain.records import Record, generate_id, utcnow


class StorageError(Exception):
    """Base class for file backend failures."""


class StorageReadError(StorageError):
    pass


class StorageWriteError(StorageError):
    pass


def load(path: Path) -> list[dict]:
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise StorageReadError(f"Malformed JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise StorageReadError(f"Could not read {path}: {exc}") from exc
    if not isinstance(data, list):
        raise StorageReadError(f"Expected a JSON array in {path}, got {type(data).__name__}")
    return data


def save(records: list[dict], path: Path) -> None:
    # Write a sibling file first so a failed write leaves the old data intact.
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        payload = json.dumps(records, ensure_ascii=False, indent=2)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as exc:
        try:
            tmp_path.unlink()
        except OSError:
            pass
        raise StorageWriteError(f"Could not write {path}: {exc}") from exc


class FileStore:
    """Reads and writes the entire record set as one JSON document."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def read_raw(self) -> list[dict]:
        return load(self.path)

    def read_all(self) -> list[Record]:
        raw = self.read_raw()
        try:
            return [Record.from_dict(item) for item in raw]
        except (AttributeError, ValueError) as exc:
            raise StorageReadError(f"Invalid record in {self.path}: {exc}") from exc

    def write_all(self, records: list[Record]) -> None:
        save([record.to_dict() for record in records], self.path)

    def last_modified(self) -> Optional[datetime]:
        try:
            return datetime.fromtimestamp(self.path.stat().st_mtime)
        except FileNotFoundError:
            return None


class JsonRecordRepository:
    """RecordBackend over a FileStore: read everything, change, write everything."""

    name = "file"

    def __init__(self, store: FileStore) -> None:
        self.store = store

    def insert(self, name: str, value: str) -> Record:
        records = self.store.read_all()
        record = Record(
            id=generate_id(r.id for r in records),
            name=name,
            value=value,
            created_at=utcnow(),
        )
        records.append(record)
        self.store.write_all(records)
        return record

    def find_all(self) -> list[Record]:
        return self.store.read_all()

    def find_and_update(self, record_id: int, changes: Mapping[str, str]) -> Optional[Record]:
        records = self.store.read_all()
        for index, record in enumerate(records):
            if record.id == record_id:
                updated = record.with_changes(
                    changes.get("name", record.name),
                    changes.get("value", record.value),
                )
                records[index] = updated
                self.store.write_all(records)
                return updated
        return None

    def find_and_delete(self, record_id: int) -> Optional[Record]:
        records = self.store.read_all()
        match = next((r for r in records if r.id == record_id), None)
        if match is None:
            return None
        self.store.write_all([r for r in records if r.id != record_id])
        return match
