"""Shared fixtures for the export engine tests."""

from datetime import datetime

import pytest

from finance_exports.models.export import (
    AggregationType,
    ColumnType,
    ExportColumn,
    ExportConfig,
    ExportFormat,
    ExportFormatting,
)


@pytest.fixture
def sample_records() -> list[dict]:
    """A small ledger of transaction records."""
    return [
        {
            "date": datetime(2024, 1, 5, 10, 30),
            "description": "Supermarket",
            "category": "food",
            "account": "checking",
            "amount": -152.4,
            "type": "expense",
            "status": "cleared",
            "tags": ["groceries", "monthly"],
            "recurring": True,
        },
        {
            "date": datetime(2024, 1, 15, 9, 0),
            "description": "Salary",
            "category": "income",
            "account": "checking",
            "amount": 5000.0,
            "type": "income",
            "status": "cleared",
            "tags": ["work"],
            "recurring": True,
        },
        {
            "date": "2024-02-03T18:45:00",
            "description": "Cinema",
            "category": "leisure",
            "account": "credit_card",
            "amount": -48.0,
            "type": "expense",
            "status": "pending",
            "tags": [],
            "recurring": False,
        },
        {
            "date": datetime(2024, 3, 20, 12, 0),
            "description": "Restaurant",
            "category": "food",
            "account": "credit_card",
            "amount": -89.9,
            "type": "expense",
            "status": "cleared",
            "recurring": False,
        },
    ]


@pytest.fixture
def make_config():
    """Build an ExportConfig with sensible defaults, overridable per test."""

    def _make(**overrides) -> ExportConfig:
        fields = {
            "name": "Ledger",
            "format": ExportFormat.CSV,
            "columns": [
                ExportColumn(key="date", title="Date", type=ColumnType.DATE),
                ExportColumn(key="description", title="Description"),
                ExportColumn(
                    key="amount",
                    title="Amount",
                    type=ColumnType.CURRENCY,
                    aggregation=AggregationType.SUM,
                ),
            ],
            "formatting": ExportFormatting(),
        }
        fields.update(overrides)
        return ExportConfig(**fields)

    return _make
