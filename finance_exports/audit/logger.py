"""
Audit Logger

DESIGN DECISION: Every config mutation and export run is logged.
This provides:
1. Complete traceability of exports
2. Debugging capability for failed runs
3. Compliance readiness

The audit logger:
- Is async, like the storage backends it writes to
- Does not crash the caller if the audit *storage* write fails
- Supports correlation IDs to trace related events
"""

from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from finance_exports.models.audit import AuditEvent, AuditEventBuilder
from finance_exports.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("finance_exports.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_configs_loaded(self, count: int, seeded: bool) -> None:
        """Log store initialization."""
        await self.log(AuditEventBuilder.configs_loaded(count=count, seeded=seeded))

    async def log_config_created(self, config_id: UUID, name: str, format: str) -> None:
        """Log config creation."""
        await self.log(
            AuditEventBuilder.config_created(config_id=config_id, name=name, format=format)
        )

    async def log_config_updated(self, config_id: UUID, fields: list[str]) -> None:
        """Log config update."""
        await self.log(AuditEventBuilder.config_updated(config_id=config_id, fields=fields))

    async def log_config_deleted(self, config_id: UUID) -> None:
        """Log config deletion."""
        await self.log(AuditEventBuilder.config_deleted(config_id=config_id))

    async def log_export_completed(
        self,
        export_id: UUID,
        config_id: UUID,
        format: str,
        record_count: int,
        size: int,
        export_time_ms: float,
        correlation_id: UUID,
    ) -> None:
        """Log a successful export run."""
        event = AuditEventBuilder.export_completed(
            export_id=export_id,
            config_id=config_id,
            format=format,
            record_count=record_count,
            size=size,
            export_time_ms=export_time_ms,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_export_failed(
        self,
        config_id: Any,
        error: Exception,
        correlation_id: UUID,
    ) -> None:
        """Log a failed export run."""
        event = AuditEventBuilder.export_failed(
            config_id=config_id,
            error_type=type(error).__name__,
            error_message=str(error),
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_size_limit_exceeded(
        self,
        config_id: UUID,
        record_count: int,
        limit: int,
        correlation_id: UUID,
    ) -> None:
        """Log a run rejected by the row guard."""
        event = AuditEventBuilder.size_limit_exceeded(
            config_id=config_id,
            record_count=record_count,
            limit=limit,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(self, operation: str, error_message: str) -> None:
        """Log a storage backend failure."""
        await self.log(
            AuditEventBuilder.storage_error(operation=operation, error_message=error_message)
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of an export run and pass it through.
    """
    return uuid4()
