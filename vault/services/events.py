"""In-process notification of record lifecycle events."""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Callable

from vault.domain.records import Record

RECORD_ADDED = "recordAdded"
RECORD_UPDATED = "recordUpdated"
RECORD_DELETED = "recordDeleted"
EVENTS = (RECORD_ADDED, RECORD_UPDATED, RECORD_DELETED)

Handler = Callable[[Record], object]

logger = logging.getLogger(__name__)


class RecordEvents:
    """Synchronous, best-effort observer list keyed by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown event: {event}")
        self._handlers[event].append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, record: Record) -> None:
        for handler in list(self._handlers.get(event, [])):
            try:
                handler(record)
            except Exception:
                # A broken listener must never fail the CRUD call that fired it.
                logger.exception("Handler %r failed for %s (record %s)", handler, event, record.id)


def log_record_events(events: RecordEvents, log: logging.Logger | None = None) -> None:
    """Subscribe a logger that writes one line per lifecycle event."""
    target = log or logging.getLogger("vault.events")

    def _handler(verb: str) -> Handler:
        return lambda record: target.info("[EVENT] Record %s: ID %s, Name: %s", verb, record.id, record.name)

    events.subscribe(RECORD_ADDED, _handler("added"))
    events.subscribe(RECORD_UPDATED, _handler("updated"))
    events.subscribe(RECORD_DELETED, _handler("deleted"))
