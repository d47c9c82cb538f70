"""
Export Models

These models define the schemas of everything the export engine owns:
named export configs, their columns/filters/formatting, and the
immutable results produced by an export run.

Records being exported are NOT modeled here. They arrive from the
data-access layer as plain mappings and are only ever addressed by
the `key` declared on each ExportColumn.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExportFormat(str, Enum):
    """
    Output formats, one per codec.

    excel = tabular/spreadsheet, csv = delimited text,
    json = structured object, xml = markup.
    """
    EXCEL = "excel"
    CSV = "csv"
    JSON = "json"
    XML = "xml"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]


_EXTENSIONS = {
    ExportFormat.EXCEL: "xlsx",
    ExportFormat.CSV: "csv",
    ExportFormat.JSON: "json",
    ExportFormat.XML: "xml",
}

_CONTENT_TYPES = {
    ExportFormat.EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.CSV: "text/csv",
    ExportFormat.JSON: "application/json",
    ExportFormat.XML: "application/xml",
}


class DataSource(str, Enum):
    """Which kind of record a config is meant for (informational)."""
    TRANSACTIONS = "transactions"
    ACCOUNTS = "accounts"
    BUDGETS = "budgets"
    GOALS = "goals"
    REPORTS = "reports"
    CUSTOM = "custom"


class ColumnType(str, Enum):
    """How a column's values are formatted."""
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"
    BOOLEAN = "boolean"
    PERCENTAGE = "percentage"


class AggregationType(str, Enum):
    """Statistic computed for a column in the summary row."""
    SUM = "sum"
    AVG = "avg"
    COUNT = "count"
    MIN = "min"
    MAX = "max"


class ScheduleFrequency(str, Enum):
    """How often a scheduled export should run."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


# =============================================================================
# FILTERS
# =============================================================================

class DateRange(BaseModel):
    """Inclusive date range."""

    start: datetime
    end: datetime

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if _as_naive_utc(self.end) < _as_naive_utc(self.start):
            raise ValueError("Date range end cannot be before start")
        return self


class AmountRange(BaseModel):
    """Inclusive range compared against the absolute record amount."""

    min: float = Field(default=0.0, ge=0)
    max: float = Field(..., ge=0)

    @model_validator(mode='after')
    def validate_order(self) -> 'AmountRange':
        if self.max < self.min:
            raise ValueError("Amount range max cannot be below min")
        return self


class _CustomFilterValue(BaseModel):
    """Common behavior of the custom filter kinds."""

    def is_active(self) -> bool:
        """None and empty-string values disable the filter."""
        value = getattr(self, "value", None)
        return value is not None and value != ""


class StringFilterValue(_CustomFilterValue):
    kind: Literal["string"] = "string"
    value: Optional[str] = None

    def matches(self, candidate: Any) -> bool:
        return isinstance(candidate, str) and candidate == self.value


class NumberFilterValue(_CustomFilterValue):
    kind: Literal["number"] = "number"
    value: Optional[float] = None

    def matches(self, candidate: Any) -> bool:
        if isinstance(candidate, bool):
            return False
        return isinstance(candidate, (int, float, Decimal)) and candidate == self.value


class BoolFilterValue(_CustomFilterValue):
    kind: Literal["bool"] = "bool"
    value: Optional[bool] = None

    def matches(self, candidate: Any) -> bool:
        return isinstance(candidate, bool) and candidate is self.value


class EnumFilterValue(_CustomFilterValue):
    kind: Literal["enum"] = "enum"
    value: Optional[str] = None
    choices: list[str] = Field(..., min_length=1)

    @model_validator(mode='after')
    def validate_choice(self) -> 'EnumFilterValue':
        if self.is_active() and self.value not in self.choices:
            raise ValueError(
                f"Enum filter value {self.value!r} is not one of {self.choices}"
            )
        return self

    def matches(self, candidate: Any) -> bool:
        if isinstance(candidate, Enum):
            candidate = candidate.value
        return candidate == self.value


CustomFilterValue = Annotated[
    Union[StringFilterValue, NumberFilterValue, BoolFilterValue, EnumFilterValue],
    Field(discriminator="kind"),
]


class ExportFilters(BaseModel):
    """
    Conjunctive set of optional filter predicates.

    Every dimension that is set narrows the records (AND).
    Within categories/accounts/tags/status, any listed value matches (OR).
    """

    date_range: Optional[DateRange] = None
    categories: Optional[list[str]] = None
    accounts: Optional[list[str]] = None
    amount_range: Optional[AmountRange] = None
    tags: Optional[list[str]] = None
    status: Optional[list[str]] = None
    custom_filters: Optional[dict[str, CustomFilterValue]] = None

    @field_validator('custom_filters', mode='before')
    @classmethod
    def coerce_scalar_filters(cls, v: Any) -> Any:
        """Accept bare scalars and wrap them in the matching filter kind."""
        if not isinstance(v, dict):
            return v

        coerced = {}
        for key, raw in v.items():
            if isinstance(raw, bool):
                coerced[key] = {"kind": "bool", "value": raw}
            elif isinstance(raw, (int, float, Decimal)):
                coerced[key] = {"kind": "number", "value": raw}
            elif raw is None or isinstance(raw, str):
                coerced[key] = {"kind": "string", "value": raw}
            else:
                coerced[key] = raw
        return coerced


# =============================================================================
# COLUMNS AND FORMATTING
# =============================================================================

class ExportColumn(BaseModel):
    """
    One output column.

    Column order in ExportConfig.columns is the output order.
    Only visible columns reach the output and the summary row.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    key: str = Field(
        ...,
        min_length=1,
        description="Source field name on each record"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Display name; processed rows are keyed by it"
    )
    type: ColumnType = ColumnType.TEXT
    format: Optional[str] = Field(
        default=None,
        description="Pattern overriding the formatting-level pattern for this column"
    )
    width: Optional[int] = Field(
        default=None,
        ge=1,
        le=255,
        description="Spreadsheet display width"
    )
    visible: bool = True
    sortable: bool = True
    aggregation: Optional[AggregationType] = None


class ExportFormatting(BaseModel):
    """Presentation options shared by all codecs."""

    include_headers: bool = True
    include_footers: bool = False
    include_summary: bool = False
    date_format: str = Field(
        default="dd/MM/yyyy",
        min_length=1,
        description="date-fns style pattern, e.g. dd/MM/yyyy"
    )
    currency_format: str = Field(
        default="R$ #,##0.00",
        min_length=1,
        description="Currency pattern: prefix, #,##0.00 number part, suffix"
    )
    number_format: str = Field(
        default="#,##0.00",
        min_length=1,
        description="Number pattern controlling grouping and decimals"
    )
    sheet_name: Optional[str] = Field(
        default=None,
        max_length=31
    )
    styling: dict[str, Any] = Field(
        default_factory=dict,
        description="Header/data/summary style hints, opaque to the pipeline"
    )


class ExportSchedule(BaseModel):
    """
    When a config should be exported automatically.

    Pure metadata: running scheduled exports is an external concern.
    """

    frequency: ScheduleFrequency
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)
    time: str = Field(
        ...,
        pattern=r"^([01]\d|2[0-3]):[0-5]\d$",
        description="Time of day, HH:MM"
    )
    recipients: list[str] = Field(default_factory=list)
    is_active: bool = True
    next_run: Optional[datetime] = None


# =============================================================================
# CONFIGS
# =============================================================================

class ExportConfigDraft(BaseModel):
    """An export config before the store has assigned identity to it."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Config name; also the filename stem of every export"
    )
    format: ExportFormat
    data_source: DataSource = DataSource.TRANSACTIONS
    filters: ExportFilters = Field(default_factory=ExportFilters)
    columns: list[ExportColumn] = Field(..., min_length=1)
    formatting: ExportFormatting = Field(default_factory=ExportFormatting)
    schedule: Optional[ExportSchedule] = None
    is_active: bool = True


class ExportConfig(ExportConfigDraft):
    """
    A named, reusable description of what to export and how.

    Owned by the ExportConfigStore; mutated only through its
    update/delete operations.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique config ID"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the config was created"
    )
    last_exported: Optional[datetime] = Field(
        default=None,
        description="When the config was last exported successfully"
    )

    @property
    def visible_columns(self) -> list[ExportColumn]:
        """Columns that reach the output, in output order."""
        return [column for column in self.columns if column.visible]


# =============================================================================
# RESULTS
# =============================================================================

class ExportMetadata(BaseModel):
    """Counts and timings of one export run."""
    model_config = ConfigDict(frozen=True)

    total_records: int = Field(ge=0)
    filtered_records: int = Field(ge=0)
    export_time_ms: float = Field(ge=0)
    columns: int = Field(ge=0, description="Number of visible columns")


class ExportResult(BaseModel):
    """
    The outcome of one successful export run.

    Immutable. Created only after encoding fully succeeded.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    config_id: UUID
    filename: str
    format: ExportFormat
    data: Union[bytes, str]
    size: int = Field(ge=0, description="Payload size in bytes")
    record_count: int = Field(ge=0)
    exported_at: datetime = Field(default_factory=utc_now)
    filters: ExportFilters
    metadata: ExportMetadata

    @property
    def content_type(self) -> str:
        return self.format.content_type
