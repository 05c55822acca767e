"""Storage contract shared by the file and SQL backends."""
from __future__ import annotations

from typing import Mapping, Optional, Protocol

from vault.domain.records import Record


class RecordBackend(Protocol):
    """CRUD primitives every backend provides. Missing ids yield None."""

    name: str

    def insert(self, name: str, value: str) -> Record:
        ...

    def find_all(self) -> list[Record]:
        ...

    def find_and_update(self, record_id: int, changes: Mapping[str, str]) -> Optional[Record]:
        ...

    def find_and_delete(self, record_id: int) -> Optional[Record]:
        ...
