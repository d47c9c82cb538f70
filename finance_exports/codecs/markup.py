"""
Markup Codec (.xml)

    <?xml version="1.0" encoding="UTF-8"?>
    <export name="..." generated="...">
      <data>
        <record>
          <amount>R$ 10,00</amount>
        </record>
      </data>
    </export>

NOTE: Unlike the other codecs, record children are named after the
column *key*, not the title (values are still read by title).
The summary row is not written.
"""

import re
from datetime import datetime, timezone
from typing import Any, Optional
from xml.sax.saxutils import escape

from finance_exports.codecs.base import Codec
from finance_exports.exceptions import SerializationError
from finance_exports.models.export import ExportConfig, ExportFormat

_XML_NAME_RE = re.compile(r"^[^\W\d][\w.\-]*$")
_EXTRA_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_markup(value: Any) -> str:
    """Escape & < > " ' for element text and attribute values."""
    return escape(str(value), _EXTRA_ENTITIES)


def _iso_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class MarkupCodec(Codec):
    """Encodes rows as an XML document."""

    format = ExportFormat.XML

    def _encode(
        self,
        rows: list[dict[str, Any]],
        summary: Optional[dict[str, Any]],
        config: ExportConfig,
        generated_at: datetime,
    ) -> str:
        columns = config.visible_columns
        for column in columns:
            if not _XML_NAME_RE.match(column.key):
                raise SerializationError(
                    self.format.value,
                    f"column key {column.key!r} is not a valid element name",
                )

        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<export name="{escape_markup(config.name)}" '
            f'generated="{_iso_timestamp(generated_at)}">',
            "  <data>",
        ]
        for row in rows:
            lines.append("    <record>")
            for column in columns:
                value = row.get(column.title)
                text = "" if value is None else escape_markup(value)
                lines.append(f"      <{column.key}>{text}</{column.key}>")
            lines.append("    </record>")
        lines.append("  </data>")
        lines.append("</export>")

        return "\n".join(lines)
