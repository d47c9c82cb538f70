"""
Export pipeline stages: filter, project/format, aggregate.

All stages are synchronous and side-effect free.
"""

from finance_exports.pipeline.aggregation import (
    DEFAULT_SUMMARY_LABEL,
    Aggregator,
    compute_statistic,
)
from finance_exports.pipeline.filters import FilterEngine, apply_filters
from finance_exports.pipeline.formatting import (
    ColumnProjector,
    NumberPattern,
    format_currency,
    format_date,
    format_percentage,
    parse_number_pattern,
)
from finance_exports.pipeline.locale import (
    EN_US,
    LOCALES,
    PT_BR,
    LocaleConventions,
    get_locale,
)

__all__ = [
    "DEFAULT_SUMMARY_LABEL",
    "Aggregator",
    "compute_statistic",
    "FilterEngine",
    "apply_filters",
    "ColumnProjector",
    "NumberPattern",
    "format_currency",
    "format_date",
    "format_percentage",
    "parse_number_pattern",
    "EN_US",
    "LOCALES",
    "PT_BR",
    "LocaleConventions",
    "get_locale",
]
