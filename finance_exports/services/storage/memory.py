"""
In-Memory Storage Implementations

Used for tests and for deployments that do not need the config list
to survive a restart.
"""

from typing import Optional
from uuid import UUID

from finance_exports.models.audit import AuditEvent
from finance_exports.services.storage.interface import (
    AuditStorageInterface,
    KeyValueStorageInterface,
)


class InMemoryKeyValueStorage(KeyValueStorageInterface):
    """Key-value slots held in a dict."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._slots: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._slots.get(key)

    async def set(self, key: str, value: str) -> None:
        self._slots[key] = value

    async def delete(self, key: str) -> bool:
        return self._slots.pop(key, None) is not None


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit log held in a list."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
