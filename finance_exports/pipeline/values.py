"""
Record Value Helpers

Records arrive from the data-access layer as mappings (or plain objects)
with loosely typed fields. These helpers read and coerce those fields.
"""

from collections.abc import Mapping
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Optional


def get_field(record: Any, key: str) -> Any:
    """Read a field from a mapping or an attribute object; None if absent."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def is_number(value: Any) -> bool:
    """True for int/float/Decimal values. Booleans are not numbers here."""
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Coerce a record date to a datetime.

    Accepts datetime, date, ISO-8601 strings and epoch milliseconds.
    Returns None for None/empty values.

    Raises:
        ValueError: If the value cannot be read as a date
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if is_number(value):
        try:
            return datetime.fromtimestamp(float(value) / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"timestamp out of range: {value}") from e
    if isinstance(value, str):
        return datetime.fromisoformat(value.strip())
    raise ValueError(f"unsupported date value of type {type(value).__name__}")


def to_naive_utc(value: datetime) -> datetime:
    """Drop timezone info after converting aware datetimes to UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
