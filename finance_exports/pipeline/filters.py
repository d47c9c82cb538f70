"""
Filter Engine

Applies the conjunctive predicates of an ExportFilters to raw records.

GUARANTEES:
- Pure: input records are never mutated, a new list is returned
- Dimensions that are not set are no-ops
- Output is never larger than input
- Bounds (dates and amounts) are inclusive
"""

from collections.abc import Iterable
from typing import Any

import structlog

from finance_exports.models.export import AmountRange, DateRange, ExportFilters
from finance_exports.pipeline.values import (
    get_field,
    is_number,
    to_datetime,
    to_naive_utc,
)

logger = structlog.get_logger(__name__)


class FilterEngine:
    """
    Narrows a record set with an ExportFilters.

    Records are matched on fixed field names: date, category, account,
    amount, tags, status; custom filters name their own fields.
    """

    def apply(self, records: Iterable[Any], filters: ExportFilters) -> list[Any]:
        filtered = list(records)
        total = len(filtered)

        if filters.date_range:
            date_range = filters.date_range
            filtered = [r for r in filtered if self._in_date_range(r, date_range)]

        if filters.categories:
            filtered = [r for r in filtered if get_field(r, "category") in filters.categories]

        if filters.accounts:
            filtered = [r for r in filtered if get_field(r, "account") in filters.accounts]

        if filters.amount_range:
            amount_range = filters.amount_range
            filtered = [r for r in filtered if self._in_amount_range(r, amount_range)]

        if filters.tags:
            wanted = filters.tags
            filtered = [r for r in filtered if self._has_any_tag(r, wanted)]

        if filters.status:
            filtered = [r for r in filtered if get_field(r, "status") in filters.status]

        if filters.custom_filters:
            for key, filter_value in filters.custom_filters.items():
                if not filter_value.is_active():
                    continue
                filtered = [r for r in filtered if filter_value.matches(get_field(r, key))]

        logger.debug("filters_applied", total_records=total, filtered_records=len(filtered))
        return filtered

    def _in_date_range(self, record: Any, date_range: DateRange) -> bool:
        try:
            record_date = to_datetime(get_field(record, "date"))
        except ValueError:
            return False
        if record_date is None:
            return False

        record_date = to_naive_utc(record_date)
        return to_naive_utc(date_range.start) <= record_date <= to_naive_utc(date_range.end)

    def _in_amount_range(self, record: Any, amount_range: AmountRange) -> bool:
        raw = get_field(record, "amount")
        if is_number(raw):
            amount = abs(float(raw))
        elif isinstance(raw, str):
            try:
                amount = abs(float(raw))
            except ValueError:
                return False
        else:
            return False

        return amount_range.min <= amount <= amount_range.max

    def _has_any_tag(self, record: Any, wanted: list[str]) -> bool:
        tags = get_field(record, "tags")
        if not tags:
            return False
        if isinstance(tags, str):
            tags = [tags]
        return any(tag in wanted for tag in tags)


def apply_filters(records: Iterable[Any], filters: ExportFilters) -> list[Any]:
    """Shortcut for FilterEngine().apply()."""
    return FilterEngine().apply(records, filters)
