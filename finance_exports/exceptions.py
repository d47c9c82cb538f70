"""
Export Engine Exceptions

Every failure of a config lookup or an export run surfaces as one of
these. None of them is swallowed inside the pipeline: a failed run
raises to the caller and leaves the store and history untouched.
"""

from typing import Any


class ExportError(Exception):
    """Base exception for export engine errors."""
    pass


class ConfigNotFoundError(ExportError):
    """No export config exists with the requested id."""

    def __init__(self, config_id: Any):
        self.config_id = config_id
        super().__init__(f"Export config {config_id} not found")


class UnsupportedFormatError(ExportError):
    """The config asks for a format no codec can produce."""

    def __init__(self, format: Any):
        self.format = format
        super().__init__(f"Unsupported format: {format}")


class SerializationError(ExportError):
    """A codec failed to encode the processed rows."""

    def __init__(self, format: str, message: str):
        self.format = format
        super().__init__(f"Failed to encode {format} export: {message}")


class SizeExceededError(ExportError):
    """Input is larger than the configured row guard."""

    def __init__(self, record_count: int, limit: int):
        self.record_count = record_count
        self.limit = limit
        super().__init__(
            f"Export input has {record_count} records, limit is {limit}"
        )


class FormattingError(ExportError):
    """A record value could not be formatted for its column type."""

    def __init__(self, column: str, value: Any, reason: str):
        self.column = column
        self.value = value
        super().__init__(f"Cannot format {value!r} for column '{column}': {reason}")


class InvalidConfigError(ExportError):
    """A stored config no longer passes validation (e.g. after a bad update)."""

    def __init__(self, config_id: Any, message: str):
        self.config_id = config_id
        super().__init__(f"Export config {config_id} is invalid: {message}")
