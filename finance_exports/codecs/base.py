"""
Codec Base

A codec turns processed rows (plus an optional summary row) into the
payload of one output format. All codecs consume the same row shape:
dicts keyed by column title.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from finance_exports.exceptions import ExportError, SerializationError
from finance_exports.models.export import ExportConfig, ExportFormat


@dataclass(frozen=True)
class EncodedPayload:
    """Output of a codec: what to hand to a download/storage sink."""
    data: Union[bytes, str]
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        """Payload size in bytes (text measured as UTF-8)."""
        if isinstance(self.data, bytes):
            return len(self.data)
        return len(self.data.encode("utf-8"))


def build_filename(name: str, format: ExportFormat, generated_at: datetime) -> str:
    """'{config name}_{yyyy-MM-dd_HH-mm-ss}.{extension}'."""
    return f"{name}_{generated_at:%Y-%m-%d_%H-%M-%S}.{format.extension}"


class Codec(ABC):
    """
    Base class for the four export codecs.

    Subclasses implement _encode(). Anything it raises that is not
    already an ExportError is wrapped in SerializationError.
    """

    format: ExportFormat

    def encode(
        self,
        rows: list[dict[str, Any]],
        summary: Optional[dict[str, Any]],
        config: ExportConfig,
        generated_at: datetime,
    ) -> EncodedPayload:
        """
        Encode processed rows for this codec's format.

        Args:
            rows: Processed rows keyed by column title
            summary: Summary row, appended when not None
            config: The config being exported (columns, formatting, name)
            generated_at: Timestamp used in the filename and document

        Raises:
            SerializationError: If encoding fails
        """
        try:
            data = self._encode(rows, summary, config, generated_at)
        except ExportError:
            raise
        except Exception as e:
            raise SerializationError(self.format.value, str(e)) from e

        return EncodedPayload(
            data=data,
            filename=build_filename(config.name, self.format, generated_at),
            content_type=self.format.content_type,
        )

    @abstractmethod
    def _encode(
        self,
        rows: list[dict[str, Any]],
        summary: Optional[dict[str, Any]],
        config: ExportConfig,
        generated_at: datetime,
    ) -> Union[bytes, str]:
        pass
