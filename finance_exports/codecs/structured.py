"""
Structured Object Codec (.json)

The processed rows as a pretty-printed JSON array; the summary row, when
produced, is appended as the last element. No other framing.

Values are written as they are. A value with no JSON form (Decimal,
datetime, NaN, ...) fails the encode instead of being turned into a
string, so parsing the output always gives back the rows passed in.
"""

import json
from datetime import datetime
from typing import Any, Optional

from finance_exports.codecs.base import Codec
from finance_exports.models.export import ExportConfig, ExportFormat


class StructuredObjectCodec(Codec):
    """Encodes rows as a JSON array."""

    format = ExportFormat.JSON

    def __init__(self, indent: int = 2):
        self._indent = indent

    def _encode(
        self,
        rows: list[dict[str, Any]],
        summary: Optional[dict[str, Any]],
        config: ExportConfig,
        generated_at: datetime,
    ) -> str:
        document = list(rows)
        if summary is not None:
            document.append(summary)
        return json.dumps(document, ensure_ascii=False, indent=self._indent, allow_nan=False)
