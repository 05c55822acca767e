"""Domain helpers for the record shape, validation and id assignment."""
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional


class InvalidRecord(ValueError):
    """Raised when a name/value pair cannot be stored."""


@dataclass(frozen=True)
class Record:
    id: int
    name: str
    value: str
    created_at: Optional[datetime] = None

    def with_changes(self, name: str, value: str) -> "Record":
        # id and created_at never change after creation
        return replace(self, name=name, value=value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "value": self.value,
            "createdAt": format_timestamp(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        try:
            record_id = int(data["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"record without a usable id: {data!r}") from exc
        return cls(
            id=record_id,
            name=str(data.get("name") or ""),
            value=str(data.get("value") or ""),
            created_at=parse_timestamp(data.get("createdAt")),
        )


def validate_record(name: Any, value: Any) -> None:
    """Raise InvalidRecord unless both fields are non-empty strings."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidRecord("Name must be a non-empty string")
    if not isinstance(value, str) or not value.strip():
        raise InvalidRecord("Value must be a non-empty string")


def generate_id(existing_ids: Iterable[int]) -> int:
    """
    Return an id distinct from every id in ``existing_ids``.

    Scan-then-assign: only safe with a single writer.
    """
    return max(existing_ids, default=0) + 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 text (``Z`` suffix accepted) into an aware datetime."""
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
