"""
Delimited Text Codec (.csv)

Every field is double-quoted with inner quotes doubled; one line per
row, "\\n" terminated. Optional header line; summary after a blank line.
"""

import csv
import io
from datetime import datetime
from typing import Any, Optional

from finance_exports.codecs.base import Codec
from finance_exports.models.export import ExportConfig, ExportFormat


class DelimitedTextCodec(Codec):
    """Encodes rows as quoted CSV text."""

    format = ExportFormat.CSV

    def __init__(self, delimiter: str = ","):
        self._delimiter = delimiter

    def _encode(
        self,
        rows: list[dict[str, Any]],
        summary: Optional[dict[str, Any]],
        config: ExportConfig,
        generated_at: datetime,
    ) -> str:
        columns = config.visible_columns

        output = io.StringIO()
        writer = csv.writer(
            output,
            delimiter=self._delimiter,
            quoting=csv.QUOTE_ALL,
            lineterminator="\n",
        )

        if config.formatting.include_headers:
            writer.writerow([column.title for column in columns])

        for row in rows:
            writer.writerow([_field(row.get(column.title)) for column in columns])

        if summary is not None:
            output.write("\n")
            writer.writerow([_field(summary.get(column.title)) for column in columns])

        return output.getvalue()


def _field(value: Any) -> Any:
    return "" if value is None else value
