"""
Data Models Package

This package contains all Pydantic models used by the export engine.
Configs, columns, filters and results must conform to these schemas.
"""

from finance_exports.models.export import (
    AggregationType,
    AmountRange,
    BoolFilterValue,
    ColumnType,
    CustomFilterValue,
    DataSource,
    DateRange,
    EnumFilterValue,
    ExportColumn,
    ExportConfig,
    ExportConfigDraft,
    ExportFilters,
    ExportFormat,
    ExportFormatting,
    ExportMetadata,
    ExportResult,
    ExportSchedule,
    NumberFilterValue,
    ScheduleFrequency,
    StringFilterValue,
    utc_now,
)
from finance_exports.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Export models
    "AggregationType",
    "AmountRange",
    "BoolFilterValue",
    "ColumnType",
    "CustomFilterValue",
    "DataSource",
    "DateRange",
    "EnumFilterValue",
    "ExportColumn",
    "ExportConfig",
    "ExportConfigDraft",
    "ExportFilters",
    "ExportFormat",
    "ExportFormatting",
    "ExportMetadata",
    "ExportResult",
    "ExportSchedule",
    "NumberFilterValue",
    "ScheduleFrequency",
    "StringFilterValue",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
