"""Tests for the filter engine."""

import copy
from datetime import datetime, timezone

import pytest

from finance_exports.models.export import AmountRange, DateRange, ExportFilters
from finance_exports.pipeline import FilterEngine, apply_filters


def _descriptions(records) -> list[str]:
    return [r["description"] for r in records]


class TestFilterDimensions:
    """Each filter dimension on its own."""

    def test_no_filters_keeps_everything(self, sample_records):
        """An empty ExportFilters is a no-op."""
        assert apply_filters(sample_records, ExportFilters()) == sample_records

    def test_date_range_is_inclusive(self, sample_records):
        """Records on the range bounds are kept."""
        filters = ExportFilters(date_range=DateRange(
            start=datetime(2024, 1, 5, 10, 30),
            end=datetime(2024, 1, 15, 9, 0),
        ))
        assert _descriptions(apply_filters(sample_records, filters)) == [
            "Supermarket",
            "Salary",
        ]

    def test_date_range_reads_iso_strings(self, sample_records):
        """String dates are parsed before comparing."""
        filters = ExportFilters(date_range=DateRange(
            start=datetime(2024, 2, 1),
            end=datetime(2024, 2, 28),
        ))
        assert _descriptions(apply_filters(sample_records, filters)) == ["Cinema"]

    def test_date_range_with_aware_bounds(self, sample_records):
        """Aware bounds are compared in UTC against naive record dates."""
        filters = ExportFilters(date_range=DateRange(
            start=datetime(2024, 1, 1, tzinfo=timezone.utc),
            end=datetime(2024, 1, 31, tzinfo=timezone.utc),
        ))
        assert len(apply_filters(sample_records, filters)) == 2

    def test_date_range_reads_epoch_milliseconds(self):
        """Numeric dates are epoch milliseconds."""
        records = [{"date": 1704067200000}]  # 2024-01-01T00:00:00Z
        filters = ExportFilters(date_range=DateRange(
            start=datetime(2024, 1, 1),
            end=datetime(2024, 1, 2),
        ))
        assert apply_filters(records, filters) == records

    def test_date_range_drops_missing_and_unparseable_dates(self):
        """Records without a usable date never match a date range."""
        records = [{"date": None}, {"date": "not a date"}, {}]
        filters = ExportFilters(date_range=DateRange(
            start=datetime(2000, 1, 1),
            end=datetime(2100, 1, 1),
        ))
        assert apply_filters(records, filters) == []

    def test_categories(self, sample_records):
        """Any listed category matches."""
        filters = ExportFilters(categories=["food", "leisure"])
        assert _descriptions(apply_filters(sample_records, filters)) == [
            "Supermarket",
            "Cinema",
            "Restaurant",
        ]

    def test_accounts(self, sample_records):
        """Test filtering on the account field."""
        filters = ExportFilters(accounts=["credit_card"])
        assert _descriptions(apply_filters(sample_records, filters)) == ["Cinema", "Restaurant"]

    def test_amount_range_uses_absolute_value(self, sample_records):
        """Expenses (negative amounts) are compared by magnitude."""
        filters = ExportFilters(amount_range=AmountRange(min=50, max=200))
        assert _descriptions(apply_filters(sample_records, filters)) == [
            "Supermarket",
            "Restaurant",
        ]

    def test_amount_range_reads_numeric_strings(self):
        """Numeric strings are accepted, other values are dropped."""
        records = [{"amount": "75.5"}, {"amount": "n/a"}, {"amount": None}]
        filters = ExportFilters(amount_range=AmountRange(min=50, max=100))
        assert apply_filters(records, filters) == [{"amount": "75.5"}]

    def test_tags_intersect(self, sample_records):
        """A record matches when any of its tags is listed."""
        filters = ExportFilters(tags=["work", "groceries"])
        assert _descriptions(apply_filters(sample_records, filters)) == ["Supermarket", "Salary"]

    def test_status(self, sample_records):
        """Test filtering on the status field."""
        filters = ExportFilters(status=["pending"])
        assert _descriptions(apply_filters(sample_records, filters)) == ["Cinema"]

    def test_custom_filter_exact_match(self, sample_records):
        """Custom filters compare the named field exactly."""
        filters = ExportFilters(custom_filters={"recurring": False})
        assert _descriptions(apply_filters(sample_records, filters)) == ["Cinema", "Restaurant"]

    def test_inactive_custom_filter_is_ignored(self, sample_records):
        """An empty custom filter value does not narrow the records."""
        filters = ExportFilters(custom_filters={"merchant": ""})
        assert len(apply_filters(sample_records, filters)) == len(sample_records)


class TestFilterComposition:
    """Dimensions combine with AND."""

    def test_dimensions_are_conjunctive(self, sample_records):
        """Test that every set dimension must match."""
        filters = ExportFilters(categories=["food"], accounts=["credit_card"])
        assert _descriptions(apply_filters(sample_records, filters)) == ["Restaurant"]

    @pytest.mark.parametrize("filters", [
        ExportFilters(),
        ExportFilters(categories=["food"]),
        ExportFilters(amount_range=AmountRange(min=0, max=1)),
        ExportFilters(tags=["none"], status=["cleared"]),
    ])
    def test_output_never_grows(self, sample_records, filters):
        """Filtering never adds records."""
        assert len(apply_filters(sample_records, filters)) <= len(sample_records)

    def test_input_is_not_mutated(self, sample_records):
        """The engine returns a new list and leaves records alone."""
        before = copy.deepcopy(sample_records)
        result = FilterEngine().apply(sample_records, ExportFilters(categories=["food"]))
        assert sample_records == before
        assert result is not sample_records

    def test_object_records(self):
        """Records may be plain objects instead of mappings."""

        class Record:
            def __init__(self, category):
                self.category = category

        records = [Record("food"), Record("rent")]
        result = apply_filters(records, ExportFilters(categories=["rent"]))
        assert [r.category for r in result] == ["rent"]
