"""
Default Export Configs

Seeded into an empty config store: a full transaction ledger and a
monthly category summary. Date ranges are fixed at seeding time.
"""

from datetime import datetime
from typing import Optional

from finance_exports.models.export import (
    AggregationType,
    ColumnType,
    DataSource,
    DateRange,
    ExportColumn,
    ExportConfigDraft,
    ExportFilters,
    ExportFormat,
    ExportFormatting,
    utc_now,
)


def _formatting(sheet_name: str) -> ExportFormatting:
    return ExportFormatting(
        include_headers=True,
        include_footers=True,
        include_summary=True,
        date_format="dd/MM/yyyy",
        currency_format="R$ #,##0.00",
        number_format="#,##0.00",
        sheet_name=sheet_name,
    )


def full_transactions_config(now: datetime) -> ExportConfigDraft:
    """Every transaction since January 1st, with the amount totalled."""
    return ExportConfigDraft(
        name="Full Transactions",
        format=ExportFormat.EXCEL,
        data_source=DataSource.TRANSACTIONS,
        filters=ExportFilters(
            date_range=DateRange(
                start=now.replace(month=1, day=1, hour=0, minute=0, second=0, microsecond=0),
                end=now,
            ),
        ),
        columns=[
            ExportColumn(key="date", title="Date", type=ColumnType.DATE, width=15),
            ExportColumn(key="description", title="Description", type=ColumnType.TEXT, width=30),
            ExportColumn(key="category", title="Category", type=ColumnType.TEXT, width=20),
            ExportColumn(
                key="amount",
                title="Amount",
                type=ColumnType.CURRENCY,
                width=15,
                aggregation=AggregationType.SUM,
            ),
            ExportColumn(key="account", title="Account", type=ColumnType.TEXT, width=20),
            ExportColumn(key="type", title="Type", type=ColumnType.TEXT, width=10),
        ],
        formatting=_formatting("Transactions"),
    )


def category_summary_config(now: datetime) -> ExportConfigDraft:
    """Per-category totals for the current month."""
    return ExportConfigDraft(
        name="Category Summary",
        format=ExportFormat.EXCEL,
        data_source=DataSource.TRANSACTIONS,
        filters=ExportFilters(
            date_range=DateRange(
                start=now.replace(day=1, hour=0, minute=0, second=0, microsecond=0),
                end=now,
            ),
        ),
        columns=[
            ExportColumn(key="category", title="Category", type=ColumnType.TEXT, width=25),
            ExportColumn(key="count", title="Count", type=ColumnType.NUMBER, width=15),
            ExportColumn(
                key="total",
                title="Total",
                type=ColumnType.CURRENCY,
                width=20,
                aggregation=AggregationType.SUM,
            ),
            ExportColumn(
                key="average",
                title="Average",
                type=ColumnType.CURRENCY,
                width=20,
                aggregation=AggregationType.AVG,
            ),
            ExportColumn(key="percentage", title="Percentage", type=ColumnType.PERCENTAGE, width=15),
        ],
        formatting=_formatting("Category Summary"),
    )


def build_default_configs(now: Optional[datetime] = None) -> list[ExportConfigDraft]:
    """The configs seeded into a fresh store."""
    now = now or utc_now()
    return [
        full_transactions_config(now),
        category_summary_config(now),
    ]
