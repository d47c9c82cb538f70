"""
JSON File Storage Implementation

All slots live in one JSON document on disk: {"slot": "value", ...}.
Writes go to a temporary file that then replaces the document, so a
crash mid-write never leaves a truncated file behind.

TRADEOFFS:
- The whole document is rewritten on every set (fine for a handful of slots)
- No cross-process locking; one writer per file is assumed
"""

import json
import os
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from finance_exports.services.storage.interface import (
    ConnectionError,
    KeyValueStorageInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)

_io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
    reraise=True,
)


class JsonFileKeyValueStorage(KeyValueStorageInterface):
    """Key-value slots persisted to a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @_io_retry
    def _read_document(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        document = json.loads(text)
        if not isinstance(document, dict):
            raise ValueError("top-level JSON value is not an object")
        return document

    @_io_retry
    def _write_document(self, document: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        tmp_path.write_text(
            json.dumps(document, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        os.replace(tmp_path, self._path)

    def _load(self) -> dict[str, str]:
        try:
            return self._read_document()
        except OSError as e:
            raise ConnectionError(f"Cannot read storage file {self._path}: {e}")
        except ValueError as e:
            raise StorageError(f"Storage file {self._path} is corrupt: {e}")

    async def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    async def set(self, key: str, value: str) -> None:
        document = self._load()
        document[key] = value
        try:
            self._write_document(document)
        except OSError as e:
            raise StorageError(f"Failed to write storage file {self._path}: {e}")
        logger.debug("storage_slot_written", path=str(self._path), key=key, size=len(value))

    async def delete(self, key: str) -> bool:
        document = self._load()
        if key not in document:
            return False
        del document[key]
        try:
            self._write_document(document)
        except OSError as e:
            raise StorageError(f"Failed to write storage file {self._path}: {e}")
        return True
