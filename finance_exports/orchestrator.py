"""
Main Orchestrator for the Export Engine

This module ties together all the components and defines the
end-to-end export flow:
records → filter → project/format → (summary) → encode → ExportResult

DESIGN DECISION: The service enforces the boundaries:
- A run is all-or-nothing: a failure leaves configs and history untouched
- Config mutations and runs are serialized behind one lock
- Every mutation and every run is audited

There is no global instance. Build one with create_export_service()
or by injecting the components, then start() it before use.
"""

import asyncio
import time
from collections.abc import Iterable
from typing import Any, Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from finance_exports.audit import AuditLogger, create_correlation_id
from finance_exports.codecs import CodecRegistry, create_default_registry
from finance_exports.config import Settings, get_settings
from finance_exports.exceptions import InvalidConfigError, SizeExceededError
from finance_exports.models.export import (
    ExportConfig,
    ExportConfigDraft,
    ExportMetadata,
    ExportResult,
    utc_now,
)
from finance_exports.pipeline import (
    DEFAULT_SUMMARY_LABEL,
    Aggregator,
    ColumnProjector,
    LocaleConventions,
    apply_filters,
    get_locale,
)
from finance_exports.services import (
    ExportConfigStore,
    ExportHistory,
    InMemoryAuditStorage,
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    KeyValueStorageInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)

DEFAULT_MAX_ROWS = 100_000


class ExportService:
    """
    Orchestrates export configs and export runs.

    Flow of export_data():
    1. Resolve config → ConfigNotFoundError
    2. Row guard → SizeExceededError
    3. Codec lookup → UnsupportedFormatError
    4. Re-validate config → InvalidConfigError
    5. Filter, project, summarize (when include_summary), encode
    6. Assemble ExportResult
    7. Mark config exported, push result to history

    Cancellation can only land on the awaits before step 5; steps 5-6
    contain no awaits.
    """

    def __init__(
        self,
        store: ExportConfigStore,
        registry: Optional[CodecRegistry] = None,
        history: Optional[ExportHistory] = None,
        audit_logger: Optional[AuditLogger] = None,
        locale: Union[str, LocaleConventions] = "pt_BR",
        max_rows: int = DEFAULT_MAX_ROWS,
        summary_label: str = DEFAULT_SUMMARY_LABEL,
    ):
        self._store = store
        self._registry = registry or create_default_registry()
        self._history = history or ExportHistory()
        self._audit_logger = audit_logger or AuditLogger()
        self._locale = get_locale(locale) if isinstance(locale, str) else locale
        self._max_rows = max_rows
        self._summary_label = summary_label
        self._lock = asyncio.Lock()
        self._started = False

    @property
    def store(self) -> ExportConfigStore:
        return self._store

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def locale(self) -> LocaleConventions:
        return self._locale

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Load persisted configs, seeding the defaults into empty storage."""
        if self._started:
            return
        try:
            seeded = await self._store.load()
        except StorageError as e:
            await self._audit_logger.log_storage_error("load_configs", str(e))
            raise
        self._started = True
        await self._audit_logger.log_configs_loaded(count=len(self._store), seeded=seeded)

    async def close(self) -> None:
        """Drop history and release the storage backend."""
        self._history.clear()
        await self._store.storage.close()
        self._started = False

    async def __aenter__(self) -> "ExportService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Configs
    # -------------------------------------------------------------------------

    def list_configs(self) -> list[ExportConfig]:
        return self._store.list()

    def get_config(self, config_id: Union[UUID, str]) -> ExportConfig:
        return self._store.get(config_id)

    async def create_config(self, draft: Union[ExportConfigDraft, dict]) -> ExportConfig:
        async with self._lock:
            config = await self._store.create(draft)
        await self._audit_logger.log_config_created(
            config_id=config.id,
            name=config.name,
            format=config.format.value,
        )
        return config

    async def update_config(
        self,
        config_id: Union[UUID, str],
        changes: dict[str, Any],
    ) -> ExportConfig:
        """Shallow-merge changes into a config. Values are not validated."""
        async with self._lock:
            config = await self._store.update(config_id, changes)
        await self._audit_logger.log_config_updated(
            config_id=config.id,
            fields=sorted(name for name in changes if name != "id"),
        )
        return config

    async def delete_config(self, config_id: Union[UUID, str]) -> bool:
        async with self._lock:
            deleted = await self._store.delete(config_id)
        if deleted:
            await self._audit_logger.log_config_deleted(config_id=self._as_uuid(config_id))
        return deleted

    # -------------------------------------------------------------------------
    # Export runs
    # -------------------------------------------------------------------------

    async def export_data(
        self,
        config_id: Union[UUID, str],
        records: Iterable[Any],
        correlation_id: Optional[UUID] = None,
    ) -> ExportResult:
        """
        Run one export.

        Args:
            config_id: Config to export with
            records: Raw domain records (mappings or objects)
            correlation_id: Ties the audit events of this run together

        Returns:
            The ExportResult, also pushed to history

        Raises:
            ConfigNotFoundError, SizeExceededError, UnsupportedFormatError,
            InvalidConfigError, FormattingError, SerializationError,
            StorageError: The run is aborted and nothing is changed
        """
        correlation_id = correlation_id or create_correlation_id()
        records = list(records)

        async with self._lock:
            try:
                result = await self._run(config_id, records)
            except SizeExceededError as e:
                await self._audit_logger.log_size_limit_exceeded(
                    config_id=self._as_uuid(config_id),
                    record_count=e.record_count,
                    limit=e.limit,
                    correlation_id=correlation_id,
                )
                raise
            except Exception as e:
                await self._audit_logger.log_export_failed(
                    config_id=config_id,
                    error=e,
                    correlation_id=correlation_id,
                )
                raise

        await self._audit_logger.log_export_completed(
            export_id=result.id,
            config_id=result.config_id,
            format=result.format.value,
            record_count=result.record_count,
            size=result.size,
            export_time_ms=result.metadata.export_time_ms,
            correlation_id=correlation_id,
        )
        return result

    async def _run(self, config_id: Union[UUID, str], records: list[Any]) -> ExportResult:
        config = self._store.get(config_id)

        if len(records) > self._max_rows:
            raise SizeExceededError(len(records), self._max_rows)

        codec = self._registry.get(config.format)
        config = self._revalidate(config)

        started = time.perf_counter()
        generated_at = utc_now()

        filtered = apply_filters(records, config.filters)
        rows = ColumnProjector(config.formatting, self._locale).project(filtered, config.columns)

        summary = None
        if config.formatting.include_summary:
            aggregator = Aggregator(config.formatting, self._locale, self._summary_label)
            summary = aggregator.summarize(rows, config.columns)

        payload = codec.encode(rows, summary, config, generated_at)

        result = ExportResult(
            config_id=config.id,
            filename=payload.filename,
            format=codec.format,
            data=payload.data,
            size=payload.size,
            record_count=len(filtered),
            exported_at=generated_at,
            filters=config.filters.model_copy(deep=True),
            metadata=ExportMetadata(
                total_records=len(records),
                filtered_records=len(filtered),
                export_time_ms=(time.perf_counter() - started) * 1000,
                columns=len(config.visible_columns),
            ),
        )

        await self._store.mark_exported(config.id, generated_at)
        self._history.push(result)

        logger.info(
            "export_finished",
            config_id=str(config.id),
            format=codec.format.value,
            records=len(filtered),
            size=result.size,
        )
        return result

    @staticmethod
    def _revalidate(config: ExportConfig) -> ExportConfig:
        try:
            return ExportConfig.model_validate(config.model_dump(warnings=False))
        except ValidationError as e:
            raise InvalidConfigError(config.id, str(e)) from e

    @staticmethod
    def _as_uuid(config_id: Union[UUID, str]) -> Optional[UUID]:
        try:
            return config_id if isinstance(config_id, UUID) else UUID(str(config_id))
        except ValueError:
            return None

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def history(self) -> list[ExportResult]:
        """Past results, most recent first."""
        return self._history.list()

    def get_export(self, export_id: Union[UUID, str]) -> Optional[ExportResult]:
        return self._history.get(export_id)


def create_export_service(
    settings: Optional[Settings] = None,
    storage: Optional[KeyValueStorageInterface] = None,
) -> ExportService:
    """
    Factory function to create a fully wired ExportService.

    Args:
        settings: Settings to build from; defaults to get_settings()
        storage: Key-value backend for configs; defaults to the
                 backend named by EXPORT_STORAGE_BACKEND

    Returns:
        An ExportService that still needs start()
    """
    settings = settings or get_settings()
    export_settings = settings.export
    storage_settings = settings.storage

    if storage is None:
        if storage_settings.backend == "file":
            storage = JsonFileKeyValueStorage(storage_settings.file_path)
        else:
            storage = InMemoryKeyValueStorage()

    audit_storage = InMemoryAuditStorage() if settings.app.persist_audit_events else None

    return ExportService(
        store=ExportConfigStore(storage, key=storage_settings.configs_key),
        registry=create_default_registry(export_settings.default_sheet_name),
        history=ExportHistory(export_settings.history_capacity),
        audit_logger=AuditLogger(audit_storage),
        locale=export_settings.locale,
        max_rows=export_settings.max_rows,
        summary_label=export_settings.summary_label,
    )
