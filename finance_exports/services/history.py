"""
Export History

Bounded, most-recent-first buffer of past export results.
In-memory only: history does not survive a restart.
"""

from collections import deque
from typing import Optional, Union
from uuid import UUID

from finance_exports.models.export import ExportResult

DEFAULT_HISTORY_CAPACITY = 50


class ExportHistory:
    """Keeps the last `capacity` results; the oldest is evicted first."""

    def __init__(self, capacity: int = DEFAULT_HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError("History capacity must be at least 1")
        self._entries: deque[ExportResult] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def push(self, result: ExportResult) -> None:
        self._entries.appendleft(result)

    def list(self) -> list[ExportResult]:
        """Results, most recent first."""
        return list(self._entries)

    def get(self, export_id: Union[UUID, str]) -> Optional[ExportResult]:
        for result in self._entries:
            if str(result.id) == str(export_id):
                return result
        return None

    @property
    def latest(self) -> Optional[ExportResult]:
        return self._entries[0] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
