"""Services package."""

from finance_exports.services.config_store import (
    DEFAULT_CONFIGS_KEY,
    ExportConfigStore,
    coerce_config_id,
)
from finance_exports.services.defaults import build_default_configs
from finance_exports.services.history import DEFAULT_HISTORY_CAPACITY, ExportHistory
from finance_exports.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    InMemoryAuditStorage,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
)

__all__ = [
    # Config store
    "DEFAULT_CONFIGS_KEY",
    "ExportConfigStore",
    "build_default_configs",
    "coerce_config_id",
    # History
    "DEFAULT_HISTORY_CAPACITY",
    "ExportHistory",
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "InMemoryAuditStorage",
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "KeyValueStorageInterface",
    "StorageError",
]
