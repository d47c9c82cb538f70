"""
Codec Set

One codec per ExportFormat, looked up through a CodecRegistry.
"""

from typing import Any, Optional

from finance_exports.codecs.base import Codec, EncodedPayload, build_filename
from finance_exports.codecs.delimited import DelimitedTextCodec
from finance_exports.codecs.markup import MarkupCodec, escape_markup
from finance_exports.codecs.spreadsheet import SpreadsheetCodec, sanitize_sheet_title
from finance_exports.codecs.structured import StructuredObjectCodec
from finance_exports.exceptions import UnsupportedFormatError
from finance_exports.models.export import ExportFormat


class CodecRegistry:
    """Maps export formats to codec instances."""

    def __init__(self, codecs: Optional[list[Codec]] = None):
        self._codecs: dict[ExportFormat, Codec] = {}
        for codec in codecs or []:
            self.register(codec)

    def register(self, codec: Codec) -> None:
        self._codecs[codec.format] = codec

    def formats(self) -> list[ExportFormat]:
        return list(self._codecs)

    def get(self, format: Any) -> Codec:
        """
        Find the codec for a format value.

        Raises:
            UnsupportedFormatError: If the value is not a known format
                                    or no codec is registered for it
        """
        try:
            key = ExportFormat(format)
        except (ValueError, TypeError):
            raise UnsupportedFormatError(format) from None

        codec = self._codecs.get(key)
        if codec is None:
            raise UnsupportedFormatError(format)
        return codec


def create_default_registry(default_sheet_name: str = "Data") -> CodecRegistry:
    """Registry holding the four built-in codecs."""
    return CodecRegistry([
        SpreadsheetCodec(default_sheet_name=default_sheet_name),
        DelimitedTextCodec(),
        StructuredObjectCodec(),
        MarkupCodec(),
    ])


__all__ = [
    "Codec",
    "CodecRegistry",
    "DelimitedTextCodec",
    "EncodedPayload",
    "MarkupCodec",
    "SpreadsheetCodec",
    "StructuredObjectCodec",
    "build_filename",
    "create_default_registry",
    "escape_markup",
    "sanitize_sheet_title",
]
