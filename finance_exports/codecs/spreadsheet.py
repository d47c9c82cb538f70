"""
Spreadsheet Codec (.xlsx)

One worksheet, named after formatting.sheet_name. Header row in bold
when headers are on, per-column display widths, and the summary row
after one blank row.
"""

import io
import re
from datetime import datetime
from typing import Any, Optional

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from finance_exports.codecs.base import Codec
from finance_exports.models.export import ExportConfig, ExportFormat

DEFAULT_COLUMN_WIDTH = 15
MAX_SHEET_TITLE_LENGTH = 31

_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")


def sanitize_sheet_title(title: Optional[str], default: str) -> str:
    """Apply Excel's sheet naming rules (no []:*?/\\, max 31 chars)."""
    cleaned = _INVALID_SHEET_CHARS.sub("_", title or "").strip().strip("'")
    cleaned = cleaned[:MAX_SHEET_TITLE_LENGTH]
    return cleaned or default


class SpreadsheetCodec(Codec):
    """Encodes rows into an .xlsx workbook with openpyxl."""

    format = ExportFormat.EXCEL

    def __init__(
        self,
        default_sheet_name: str = "Data",
        default_width: int = DEFAULT_COLUMN_WIDTH,
    ):
        self._default_sheet_name = default_sheet_name
        self._default_width = default_width

    def _encode(
        self,
        rows: list[dict[str, Any]],
        summary: Optional[dict[str, Any]],
        config: ExportConfig,
        generated_at: datetime,
    ) -> bytes:
        columns = config.visible_columns
        formatting = config.formatting

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sanitize_sheet_title(formatting.sheet_name, self._default_sheet_name)

        if formatting.include_headers:
            _append_row(sheet, [column.title for column in columns])
            for cell in sheet[1]:
                cell.font = Font(bold=True)

        for row in rows:
            _append_row(sheet, [row.get(column.title) for column in columns])

        if summary is not None:
            sheet.append([None] * len(columns))
            _append_row(sheet, [summary.get(column.title) for column in columns])

        for index, column in enumerate(columns, start=1):
            width = column.width or self._default_width
            sheet.column_dimensions[get_column_letter(index)].width = width

        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()


def _append_row(sheet, values: list[Any]) -> None:
    """Append a row, keeping every string as a text cell."""
    sheet.append(values)
    row_index = sheet.max_row
    for column_index, value in enumerate(values, start=1):
        # openpyxl would otherwise store "=..." strings as formulas
        if isinstance(value, str):
            sheet.cell(row=row_index, column=column_index).data_type = "s"
