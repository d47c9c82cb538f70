"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep export configs in memory, in a file, or in a real database
2. Use in-memory storage for testing
3. Keep the config store decoupled from the storage implementation

The config list lives in a single key-value slot. The interface is
intentionally simple: string keys, string (JSON) values.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from finance_exports.models.audit import AuditEvent


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key-value slots.

    Any storage implementation (memory, file, Redis, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Read a slot.

        Args:
            key: Slot name

        Returns:
            The stored value, or None if the slot is empty

        Raises:
            StorageError: If the backend cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """
        Overwrite a slot.

        Args:
            key: Slot name
            value: Serialized value

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Empty a slot.

        Returns:
            True if the slot held a value
        """
        pass

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one export run).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
