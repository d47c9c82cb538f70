"""
Audit Models for the Export Engine

Every config mutation and every export run is logged for audit purposes.
This provides:
1. Traceability of who exported what, and with which filters
2. Debugging information when a run fails
3. Ability to reconstruct the history of a config

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from finance_exports.models.export import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Config store
    CONFIGS_LOADED = "configs_loaded"
    CONFIG_CREATED = "config_created"
    CONFIG_UPDATED = "config_updated"
    CONFIG_DELETED = "config_deleted"

    # Export runs
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"
    SIZE_LIMIT_EXCEEDED = "size_limit_exceeded"

    # System events
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'export_config', 'export')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }

    def to_row(self) -> list:
        """
        Flatten to a row of strings for tabular audit storage.

        Columns: [event_id, timestamp, event_type, severity, entity_type,
        entity_id, correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.entity_type or "",
            str(self.entity_id) if self.entity_id else "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.config_created(config_id, name)
        event = AuditEventBuilder.export_completed(export_id, config_id, ...)
    """

    @staticmethod
    def configs_loaded(count: int, seeded: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIGS_LOADED,
            entity_type="export_config",
            description=(
                f"Seeded {count} default export configs"
                if seeded
                else f"Loaded {count} export configs from storage"
            ),
            details={"count": count, "seeded": seeded},
        )

    @staticmethod
    def config_created(config_id: UUID, name: str, format: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIG_CREATED,
            entity_type="export_config",
            entity_id=config_id,
            description=f"Export config created: {name}",
            details={"name": name, "format": format},
        )

    @staticmethod
    def config_updated(config_id: UUID, fields: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIG_UPDATED,
            entity_type="export_config",
            entity_id=config_id,
            description=f"Export config updated: {', '.join(fields) or 'no fields'}",
            details={"fields": fields},
        )

    @staticmethod
    def config_deleted(config_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CONFIG_DELETED,
            entity_type="export_config",
            entity_id=config_id,
            description="Export config deleted",
        )

    @staticmethod
    def export_completed(
        export_id: UUID,
        config_id: UUID,
        format: str,
        record_count: int,
        size: int,
        export_time_ms: float,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            entity_type="export",
            entity_id=export_id,
            correlation_id=correlation_id,
            description=f"Exported {record_count} records as {format} ({size} bytes)",
            details={
                "config_id": str(config_id),
                "format": format,
                "record_count": record_count,
                "size": size,
                "export_time_ms": round(export_time_ms, 3),
            },
        )

    @staticmethod
    def export_failed(
        config_id: Any,
        error_type: str,
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="export_config",
            correlation_id=correlation_id,
            description=f"Export failed: {error_type}",
            error_code=error_type,
            error_message=error_message,
            details={"config_id": str(config_id)},
        )

    @staticmethod
    def size_limit_exceeded(
        config_id: UUID,
        record_count: int,
        limit: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SIZE_LIMIT_EXCEEDED,
            severity=AuditSeverity.WARNING,
            entity_type="export_config",
            entity_id=config_id,
            correlation_id=correlation_id,
            description=f"Export rejected: {record_count} records over limit of {limit}",
            details={"record_count": record_count, "limit": limit},
        )

    @staticmethod
    def storage_error(operation: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation},
        )
