"""
Storage Services Package

Provides abstract interfaces and concrete implementations for the
key-value slot that holds export configs, and for the audit log.
"""

from finance_exports.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    KeyValueStorageInterface,
    StorageError,
)
from finance_exports.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryKeyValueStorage,
)
from finance_exports.services.storage.file_store import JsonFileKeyValueStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "KeyValueStorageInterface",
    # Exceptions
    "ConnectionError",
    "StorageError",
    # Implementations
    "InMemoryAuditStorage",
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
]
