"""
Tests for the Export Engine models

Test strategy:
1. Unit tests for individual components (models, pipeline stages, codecs)
2. Integration tests for the export service (in-memory storage)
3. No real files outside pytest's tmp_path
"""

import pytest
from datetime import datetime
from uuid import UUID

from pydantic import ValidationError

from finance_exports.models.export import (
    AmountRange,
    BoolFilterValue,
    ColumnType,
    DateRange,
    EnumFilterValue,
    ExportColumn,
    ExportConfig,
    ExportConfigDraft,
    ExportFilters,
    ExportFormat,
    ExportMetadata,
    ExportResult,
    NumberFilterValue,
    StringFilterValue,
)
from finance_exports.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExportFormat:
    """Tests for the output format enum."""

    def test_extensions(self):
        """Each format maps to its file extension."""
        assert ExportFormat.EXCEL.extension == "xlsx"
        assert ExportFormat.CSV.extension == "csv"
        assert ExportFormat.JSON.extension == "json"
        assert ExportFormat.XML.extension == "xml"

    def test_content_types(self):
        """Each format maps to its content type."""
        assert ExportFormat.CSV.content_type == "text/csv"
        assert ExportFormat.JSON.content_type == "application/json"
        assert ExportFormat.XML.content_type == "application/xml"
        assert "spreadsheetml" in ExportFormat.EXCEL.content_type

    def test_unknown_format_rejected(self):
        """Formats outside the four codecs are not valid."""
        with pytest.raises(ValueError):
            ExportFormat("pdf")


class TestFilterModels:
    """Tests for filter-related Pydantic models."""

    def test_date_range_rejects_end_before_start(self):
        """Test that an inverted date range is rejected."""
        with pytest.raises(ValidationError):
            DateRange(start=datetime(2024, 2, 1), end=datetime(2024, 1, 1))

    def test_date_range_allows_same_instant(self):
        """A zero-length range is valid."""
        moment = datetime(2024, 1, 1)
        assert DateRange(start=moment, end=moment).start == moment

    def test_amount_range_rejects_inverted_bounds(self):
        """Test that max below min is rejected."""
        with pytest.raises(ValidationError):
            AmountRange(min=100, max=10)

    def test_amount_range_rejects_negative_min(self):
        """Amounts are compared in absolute value, so bounds are non-negative."""
        with pytest.raises(ValidationError):
            AmountRange(min=-1, max=10)

    def test_custom_filter_scalars_are_coerced(self):
        """Bare scalars become the matching filter kind."""
        filters = ExportFilters(custom_filters={
            "recurring": True,
            "installments": 3,
            "merchant": "ACME",
        })
        assert isinstance(filters.custom_filters["recurring"], BoolFilterValue)
        assert isinstance(filters.custom_filters["installments"], NumberFilterValue)
        assert isinstance(filters.custom_filters["merchant"], StringFilterValue)

    def test_custom_filter_enum_kind(self):
        """Enum filters carry their choices."""
        filters = ExportFilters(custom_filters={
            "type": {"kind": "enum", "value": "expense", "choices": ["income", "expense"]},
        })
        value = filters.custom_filters["type"]
        assert isinstance(value, EnumFilterValue)
        assert value.matches("expense")
        assert not value.matches("income")

    def test_enum_filter_rejects_value_outside_choices(self):
        """An enum value must be one of its choices."""
        with pytest.raises(ValidationError):
            EnumFilterValue(value="transfer", choices=["income", "expense"])

    def test_empty_custom_filters_are_inactive(self):
        """None and empty strings disable a custom filter."""
        assert not StringFilterValue(value="").is_active()
        assert not StringFilterValue(value=None).is_active()
        assert StringFilterValue(value="x").is_active()

    def test_custom_filters_are_type_strict(self):
        """A number filter does not match strings or booleans."""
        five = NumberFilterValue(value=5)
        assert five.matches(5)
        assert five.matches(5.0)
        assert not five.matches("5")
        assert not NumberFilterValue(value=1).matches(True)
        assert not BoolFilterValue(value=True).matches(1)


class TestExportConfigModels:
    """Tests for configs and columns."""

    def test_draft_requires_a_column(self):
        """A config without columns is rejected."""
        with pytest.raises(ValidationError):
            ExportConfigDraft(name="Empty", format=ExportFormat.CSV, columns=[])

    def test_column_defaults(self):
        """Columns default to visible text columns."""
        column = ExportColumn(key="description", title="Description")
        assert column.type == ColumnType.TEXT
        assert column.visible is True
        assert column.aggregation is None

    def test_config_gets_id_and_creation_time(self, make_config):
        """Configs are created with an id and a timestamp."""
        first = make_config()
        second = make_config()
        assert isinstance(first.id, UUID)
        assert first.id != second.id
        assert first.created_at is not None
        assert first.last_exported is None

    def test_visible_columns(self, make_config):
        """Hidden columns are dropped, order is kept."""
        config = make_config(columns=[
            ExportColumn(key="a", title="A"),
            ExportColumn(key="b", title="B", visible=False),
            ExportColumn(key="c", title="C"),
        ])
        assert [c.key for c in config.visible_columns] == ["a", "c"]


class TestExportResult:
    """Tests for the immutable export result."""

    def _result(self, data) -> ExportResult:
        return ExportResult(
            config_id=UUID(int=1),
            filename="Ledger_2024-01-01_00-00-00.csv",
            format=ExportFormat.CSV,
            data=data,
            size=3,
            record_count=1,
            filters=ExportFilters(),
            metadata=ExportMetadata(
                total_records=2,
                filtered_records=1,
                export_time_ms=0.5,
                columns=1,
            ),
        )

    def test_result_is_frozen(self):
        """Results cannot be modified after creation."""
        result = self._result("a,b")
        with pytest.raises(ValidationError):
            result.filename = "other.csv"

    def test_bytes_payload_is_kept(self):
        """Binary payloads stay bytes."""
        assert self._result(b"abc").data == b"abc"

    def test_content_type_follows_format(self):
        """Test content type is derived from the format."""
        assert self._result("a").content_type == "text/csv"


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.CONFIG_CREATED,
            description="Test event",
        )
        assert event.event_type == AuditEventType.CONFIG_CREATED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None

    def test_config_created_builder(self):
        """Builder fills entity and details."""
        config_id = UUID(int=7)
        event = AuditEventBuilder.config_created(config_id, "Ledger", "csv")
        assert event.entity_type == "export_config"
        assert event.entity_id == config_id

    def test_export_failed_is_an_error(self):
        """Failed runs are logged with error severity."""
        event = AuditEventBuilder.export_failed(
            config_id="missing",
            error_type="ConfigNotFoundError",
            error_message="Export config missing not found",
            correlation_id=UUID(int=3),
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.error_code == "ConfigNotFoundError"
        assert event.details["config_id"] == "missing"

    def test_audit_event_to_row(self):
        """Test conversion to a flat row."""
        event = AuditEvent(
            event_type=AuditEventType.EXPORT_COMPLETED,
            description="Test event",
            details={"size": 10},
        )
        row = event.to_row()
        assert isinstance(row, list)
        assert "export_completed" in row
