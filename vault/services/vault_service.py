"""
Record vault use cases.

VaultService exposes one CRUD/search/sort/stats contract over whichever
backend was selected at startup, plus JSON backups and a plain-text export.
Snapshots (backup, export) and the "last modified" stat always describe the
JSON data file, even when the SQL backend is active.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from vault.core.config import Settings, get_settings
from vault.domain.records import Record, format_timestamp, utcnow, validate_record
from vault.repositories.base import RecordBackend
from vault.repositories.json_storage import (
    FileStore,
    JsonRecordRepository,
    StorageError,
    StorageWriteError,
)
from vault.services.backend import BackendSelection, resolve_backend
from vault.services.events import (
    RECORD_ADDED,
    RECORD_DELETED,
    RECORD_UPDATED,
    RecordEvents,
    log_record_events,
)

SORT_FIELDS = ("name", "value")

logger = logging.getLogger(__name__)


@dataclass
class VaultStats:
    total: int
    longest: str
    longest_len: int
    earliest: str
    latest: str
    last_modified: str

    def to_dict(self) -> dict:
        return asdict(self)


class VaultService:
    """Unifies the file and SQL backends behind one contract."""

    def __init__(
        self,
        selection: BackendSelection,
        file_store: FileStore,
        events: Optional[RecordEvents] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.selection = selection
        self.file_store = file_store
        self.events = events or RecordEvents()
        self.settings = settings or get_settings()
        self._clock = clock

    @property
    def backend(self) -> RecordBackend:
        return self.selection.backend

    @property
    def remote_available(self) -> bool:
        return self.selection.remote_available

    # -------------------------------------- CRUD --------------------------------------
    async def add_record(self, name: str, value: str) -> Record:
        validate_record(name, value)
        record = await asyncio.to_thread(self.backend.insert, name, value)
        self.events.emit(RECORD_ADDED, record)
        await asyncio.to_thread(self._backup_after_change)
        return record

    async def list_records(self) -> list[Record]:
        return await asyncio.to_thread(self.backend.find_all)

    async def update_record(self, record_id: int, new_name: str, new_value: str) -> Optional[Record]:
        validate_record(new_name, new_value)
        updated = await asyncio.to_thread(
            self.backend.find_and_update, record_id, {"name": new_name, "value": new_value}
        )
        if updated is not None:
            self.events.emit(RECORD_UPDATED, updated)
        return updated

    async def delete_record(self, record_id: int) -> Optional[Record]:
        deleted = await asyncio.to_thread(self.backend.find_and_delete, record_id)
        if deleted is not None:
            self.events.emit(RECORD_DELETED, deleted)
            await asyncio.to_thread(self._backup_after_change)
        return deleted

    # -------------------------------------- queries --------------------------------------
    async def search_records(self, keyword: str) -> list[Record]:
        term = (keyword or "").lower()
        records = await self.list_records()
        return [
            r
            for r in records
            if term in str(r.id) or term in r.name.lower() or term in r.value.lower()
        ]

    async def sort_records(self, field: str = "name", order: str = "asc") -> list[Record]:
        ordered = await self.list_records()
        # Any other field keeps storage (creation) order; desc still reverses it.
        if field in SORT_FIELDS:
            ordered.sort(key=lambda r: (getattr(r, field).casefold(), getattr(r, field)))
        if order == "desc":
            ordered.reverse()
        return ordered

    async def get_stats(self) -> VaultStats:
        records = await self.list_records()
        last_modified = self._last_modified()
        if not records:
            return VaultStats(0, "", 0, "", "", last_modified)

        longest = ""
        for record in records:
            if len(record.name) > len(longest):
                longest = record.name

        now = self._clock()
        dates = [(r.created_at or now).astimezone(timezone.utc) for r in records]
        return VaultStats(
            total=len(records),
            longest=longest,
            longest_len=len(longest),
            earliest=min(dates).date().isoformat(),
            latest=max(dates).date().isoformat(),
            last_modified=last_modified,
        )

    # -------------------------------------- snapshots --------------------------------------
    def export_data(self) -> Path:
        """Write a human-readable listing of the data file and return its path."""
        records = self.file_store.read_all()
        header = (
            f"Vault Export - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n"
            f"Total Records: {len(records)}\n"
            f"File: {self.file_store.path.name}\n\n"
            "Records:\n"
        )
        lines = [
            f"ID: {r.id} | Name: {r.name} | Value: {r.value} | Created: {format_timestamp(r.created_at) or 'N/A'}"
            for r in records
        ]
        target = self.settings.export_file
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(header + "\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StorageWriteError(f"Could not write export {target}: {exc}") from exc
        logger.info("Data exported to %s", target)
        return target

    def create_backup(self) -> Path:
        """Snapshot the data file into the backup directory and return the new path."""
        stamp = self._clock().astimezone(timezone.utc).strftime("%Y-%m-%d_%H-%M-%S")
        backup_dir = self.settings.backup_dir
        target = backup_dir / f"backup_{stamp}.json"
        data = self.file_store.read_raw()
        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            target.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as exc:
            raise StorageWriteError(f"Could not write backup {target}: {exc}") from exc
        logger.info("Backup: %s", target.name)
        return target

    # -------------------------------------- helpers --------------------------------------
    def _backup_after_change(self) -> None:
        # The change is already persisted; a failed snapshot is only reported.
        try:
            self.create_backup()
        except StorageError:
            logger.exception("Automatic backup failed")

    def _last_modified(self) -> str:
        mtime = self.file_store.last_modified()
        return mtime.strftime("%Y-%m-%d %H:%M:%S") if mtime else "Never"


async def create_vault_service(settings: Optional[Settings] = None) -> VaultService:
    """Build a service with the logging subscriber and a probed backend."""
    settings = settings or get_settings()
    store = FileStore(settings.data_file)
    events = RecordEvents()
    log_record_events(events)
    selection = await resolve_backend(settings, JsonRecordRepository(store))
    return VaultService(selection, store, events, settings)
