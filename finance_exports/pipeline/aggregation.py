"""
Aggregator

Builds the single summary row appended to an export when any visible
column declares an aggregation.

IMPORTANT: Statistics are computed from the *processed* rows, i.e. from
values that have already been formatted. A currency string is parsed
back by stripping the currency symbol, whitespace, "." and ",", so the
cents digits are kept as part of the integer: "R$ 10,50" reads as 1050
and a column of 10.50, -5.25 and 100.00 sums to "R$ 10.525,00". Totals
therefore depend on the decimals and locale used when formatting.

Empty input: sum and count are 0; avg, min and max are None.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import structlog

from finance_exports.models.export import (
    AggregationType,
    ColumnType,
    ExportColumn,
    ExportFormatting,
)
from finance_exports.pipeline.formatting import format_currency, parse_number_pattern
from finance_exports.pipeline.locale import LocaleConventions
from finance_exports.pipeline.values import is_number

logger = structlog.get_logger(__name__)

DEFAULT_SUMMARY_LABEL = "TOTAL"


class Aggregator:
    """Computes the summary row for a set of processed rows."""

    def __init__(
        self,
        formatting: ExportFormatting,
        locale: LocaleConventions,
        label: str = DEFAULT_SUMMARY_LABEL,
    ):
        self._formatting = formatting
        self._locale = locale
        self._label = label

    def summarize(
        self,
        rows: list[dict[str, Any]],
        columns: list[ExportColumn],
    ) -> Optional[dict[str, Any]]:
        """
        Build the summary row, or None if no visible column aggregates.

        The first visible column holds the label, non-aggregated
        columns are blank, aggregated columns hold their statistic.
        """
        visible = [column for column in columns if column.visible]
        aggregated = [column for column in visible if column.aggregation]
        if not aggregated:
            return None

        summary: dict[str, Any] = {column.title: "" for column in visible}
        summary[visible[0].title] = self._label

        for column in aggregated:
            values = [self.parse_value(column, row.get(column.title)) for row in rows]
            statistic = compute_statistic(column.aggregation, values)
            summary[column.title] = self._render(column, statistic)

        logger.debug("summary_computed", rows=len(rows), aggregated_columns=len(aggregated))
        return summary

    def parse_value(self, column: ExportColumn, value: Any) -> Decimal:
        """
        Read a processed value back as a number.

        Numbers are used directly; unparseable values count as 0.
        Currency strings lose their symbol, whitespace, "." and ",";
        percentage strings lose the "%"; other strings are read with
        the locale separators.
        """
        if is_number(value):
            return value if isinstance(value, Decimal) else Decimal(str(value))
        if not isinstance(value, str):
            return Decimal(0)

        if column.type == ColumnType.PERCENTAGE:
            text = value.strip().rstrip("%")
        else:
            currency_pattern = self._formatting.currency_format
            if column.type == ColumnType.CURRENCY and column.format:
                currency_pattern = column.format
            stripped = _strip_affixes(value, currency_pattern)
            if stripped != value:
                text = "".join(stripped.split()).replace(".", "").replace(",", "")
            else:
                text = "".join(_strip_affixes(value, column.format).split())
                text = text.replace(self._locale.group_separator, "")
                text = text.replace(self._locale.decimal_separator, ".")

        try:
            parsed = Decimal(text)
        except InvalidOperation:
            return Decimal(0)
        return parsed if parsed.is_finite() else Decimal(0)

    def _render(self, column: ExportColumn, statistic: Optional[Decimal]) -> Any:
        if statistic is None:
            return None
        if column.aggregation == AggregationType.COUNT:
            return int(statistic)
        if column.type == ColumnType.CURRENCY:
            pattern = column.format or self._formatting.currency_format
            return format_currency(statistic, pattern, self._locale)
        return float(statistic)


def compute_statistic(
    aggregation: AggregationType,
    values: list[Decimal],
) -> Optional[Decimal]:
    """Compute one aggregation over already-parsed values."""
    if aggregation == AggregationType.SUM:
        return sum(values, Decimal(0))
    if aggregation == AggregationType.COUNT:
        return Decimal(len(values))
    if not values:
        return None
    if aggregation == AggregationType.AVG:
        return sum(values, Decimal(0)) / len(values)
    if aggregation == AggregationType.MIN:
        return min(values)
    if aggregation == AggregationType.MAX:
        return max(values)
    raise ValueError(f"Unknown aggregation: {aggregation}")


def _strip_affixes(value: str, raw_pattern: Optional[str]) -> str:
    """Remove a number pattern's prefix and suffix text from value."""
    if not raw_pattern:
        return value
    try:
        pattern = parse_number_pattern(raw_pattern)
    except ValueError:
        return value
    for affix in (pattern.prefix.strip(), pattern.suffix.strip()):
        if affix:
            value = value.replace(affix, "")
    return value
