"""
Column Projector / Formatter

Maps filtered records to processed rows: one dict per record, keyed by
column title, holding only visible columns in config order, with each
value formatted for its column type.

Patterns:
- Numbers and currency use spreadsheet-style patterns such as
  "R$ #,##0.00": text before/after the number part is kept as a
  prefix/suffix, "," turns grouping on, digits after "." set decimals
  ("0" = always shown, "#" = shown when non-zero).
- Dates use date-fns style tokens such as "dd/MM/yyyy".
Separators and names come from the active LocaleConventions.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from functools import lru_cache
from typing import Any

import structlog

from finance_exports.exceptions import FormattingError
from finance_exports.models.export import ColumnType, ExportColumn, ExportFormatting
from finance_exports.pipeline.locale import LocaleConventions
from finance_exports.pipeline.values import get_field, is_number, to_datetime

logger = structlog.get_logger(__name__)


_NUMBER_PATTERN_RE = re.compile(
    r"^(?P<prefix>[^#0]*?)(?P<integer>[#0][#0,]*)(?:\.(?P<fraction>[#0]+))?(?P<suffix>[^#0]*)$"
)

_DATE_TOKEN_RE = re.compile(
    r"'[^']*'|yyyy|yy|MMMM|MMM|MM|M|dd|d|EEEE|EEE|HH|H|mm|m|ss|s"
)


@dataclass(frozen=True)
class NumberPattern:
    """A parsed number/currency pattern."""
    prefix: str
    suffix: str
    grouping: bool
    min_decimals: int
    max_decimals: int

    def format(self, value: Any, locale: LocaleConventions) -> str:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            raise ValueError("value is not a finite number")

        quantum = Decimal(1).scaleb(-self.max_decimals)
        rounded = amount.quantize(quantum, rounding=ROUND_HALF_UP)
        negative = rounded < 0

        spec = f"{',' if self.grouping else ''}.{self.max_decimals}f"
        text = format(abs(rounded), spec)

        if self.max_decimals > self.min_decimals:
            integer, fraction = text.split(".")
            fraction = fraction.rstrip("0").ljust(self.min_decimals, "0")
            text = f"{integer}.{fraction}" if fraction else integer

        text = text.translate(str.maketrans({
            ",": locale.group_separator,
            ".": locale.decimal_separator,
        }))
        return f"{'-' if negative else ''}{self.prefix}{text}{self.suffix}"


@lru_cache(maxsize=64)
def parse_number_pattern(pattern: str) -> NumberPattern:
    """
    Parse a pattern such as "R$ #,##0.00" or "#,##0.##".

    Raises:
        ValueError: If the pattern has no number part
    """
    match = _NUMBER_PATTERN_RE.match(pattern)
    if not match:
        raise ValueError(f"Invalid number pattern: {pattern!r}")

    fraction = match.group("fraction") or ""
    return NumberPattern(
        prefix=match.group("prefix"),
        suffix=match.group("suffix"),
        grouping="," in match.group("integer"),
        min_decimals=fraction.count("0"),
        max_decimals=len(fraction),
    )


def format_date(value: datetime, pattern: str, locale: LocaleConventions) -> str:
    """Render a datetime with a date-fns style pattern."""

    def render(match: re.Match) -> str:
        token = match.group(0)
        if token.startswith("'"):
            return token[1:-1] or "'"
        if token == "yyyy":
            return f"{value.year:04d}"
        if token == "yy":
            return f"{value.year % 100:02d}"
        if token == "MMMM":
            return locale.month_names[value.month - 1]
        if token == "MMM":
            return locale.month_abbreviations[value.month - 1]
        if token == "EEEE":
            return locale.weekday_names[value.weekday()]
        if token == "EEE":
            return locale.weekday_abbreviations[value.weekday()]

        number = {
            "M": value.month,
            "d": value.day,
            "H": value.hour,
            "m": value.minute,
            "s": value.second,
        }[token[0]]
        return f"{number:0{len(token)}d}"

    return _DATE_TOKEN_RE.sub(render, pattern)


def format_percentage(value: Any) -> str:
    """0.125 -> '12.50%'."""
    return f"{float(value) * 100:.2f}%"


class ColumnProjector:
    """
    Projects records into processed rows.

    Formatting rules per column type:
    - date: pattern from the column or formatting.date_format; falsy -> ""
    - currency: pattern from the column or formatting.currency_format
    - percentage: value * 100 with two decimals and a "%" suffix
    - number: pattern from the column or formatting.number_format
    - boolean: locale yes/no label by truthiness
    - text: passed through untouched, including None for missing fields
    Non-numeric values in currency/percentage/number columns pass through.
    """

    def __init__(self, formatting: ExportFormatting, locale: LocaleConventions):
        self._formatting = formatting
        self._locale = locale

    def project(
        self,
        records: Iterable[Any],
        columns: list[ExportColumn],
    ) -> list[dict[str, Any]]:
        visible = [column for column in columns if column.visible]

        rows = []
        for record in records:
            row = {}
            for column in visible:
                row[column.title] = self.format_value(column, get_field(record, column.key))
            rows.append(row)

        logger.debug("rows_projected", rows=len(rows), columns=len(visible))
        return rows

    def format_value(self, column: ExportColumn, value: Any) -> Any:
        """
        Format one value for its column.

        Raises:
            FormattingError: If a date or pattern cannot be rendered
        """
        try:
            return self._format(column, value)
        except (ValueError, ArithmeticError) as e:
            raise FormattingError(column.title, value, str(e)) from e

    def _format(self, column: ExportColumn, value: Any) -> Any:
        column_type = column.type

        if column_type == ColumnType.DATE:
            if not value:
                return ""
            pattern = column.format or self._formatting.date_format
            return format_date(to_datetime(value), pattern, self._locale)

        if column_type == ColumnType.CURRENCY:
            if not is_number(value):
                return value
            pattern = parse_number_pattern(column.format or self._formatting.currency_format)
            return pattern.format(value, self._locale)

        if column_type == ColumnType.PERCENTAGE:
            return format_percentage(value) if is_number(value) else value

        if column_type == ColumnType.NUMBER:
            if not is_number(value):
                return value
            pattern = parse_number_pattern(column.format or self._formatting.number_format)
            return pattern.format(value, self._locale)

        if column_type == ColumnType.BOOLEAN:
            return self._locale.true_label if value else self._locale.false_label

        return value


def format_currency(
    value: Any,
    pattern: str,
    locale: LocaleConventions,
) -> str:
    """Format a number with a currency pattern."""
    try:
        return parse_number_pattern(pattern).format(value, locale)
    except InvalidOperation as e:
        raise ValueError(f"Cannot format {value!r} as currency") from e
