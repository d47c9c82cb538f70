"""
Export Config Store

Owns the named export configs and persists the full list to a single
key-value slot after every mutation.

DESIGN DECISION: Every mutation builds the new config map, persists it,
and only then swaps it in. If the storage write fails, the in-memory
state is exactly what it was before the call.

Updates are shallow merges with no validation. A config made invalid by
an update is stored as-is and fails on its next export.
"""

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional, Union
from uuid import UUID

import structlog
from pydantic import ValidationError

from finance_exports.exceptions import ConfigNotFoundError
from finance_exports.models.export import ExportConfig, ExportConfigDraft
from finance_exports.services.defaults import build_default_configs
from finance_exports.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
)

logger = structlog.get_logger(__name__)

DEFAULT_CONFIGS_KEY = "export_configs"

ConfigId = Union[UUID, str]


def coerce_config_id(config_id: Any) -> Optional[UUID]:
    """UUID from a UUID or its string form; None if it is neither."""
    if isinstance(config_id, UUID):
        return config_id
    try:
        return UUID(str(config_id))
    except ValueError:
        return None


class ExportConfigStore:
    """
    Named export configs backed by a key-value slot.

    Call load() once before use: it restores the persisted list, or
    seeds and persists the default configs when the slot is empty.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        key: str = DEFAULT_CONFIGS_KEY,
        default_factory: Callable[[], list[ExportConfigDraft]] = build_default_configs,
    ):
        self._storage = storage
        self._key = key
        self._default_factory = default_factory
        self._configs: dict[UUID, ExportConfig] = {}

    @property
    def storage(self) -> KeyValueStorageInterface:
        return self._storage

    async def load(self) -> bool:
        """
        Restore persisted configs, seeding defaults into an empty slot.

        Returns:
            True if the defaults were seeded

        Raises:
            StorageError: If the slot cannot be read or is corrupt
        """
        raw = await self._storage.get(self._key)

        if raw:
            self._configs = self._decode(raw)
            logger.info("export_configs_loaded", count=len(self._configs))
            return False

        configs: dict[UUID, ExportConfig] = {}
        for draft in self._default_factory():
            config = ExportConfig.model_validate(draft.model_dump())
            configs[config.id] = config
        await self._commit(configs)
        logger.info("export_configs_seeded", count=len(configs))
        return True

    def _decode(self, raw: str) -> dict[UUID, ExportConfig]:
        try:
            entries = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"Persisted export configs are not valid JSON: {e}") from e
        if not isinstance(entries, list):
            raise StorageError("Persisted export configs are not a list")

        configs: dict[UUID, ExportConfig] = {}
        for index, entry in enumerate(entries):
            config = self._decode_entry(index, entry)
            if config.id in configs:
                raise StorageError(f"Duplicate export config id {config.id} in storage")
            configs[config.id] = config
        return configs

    def _decode_entry(self, index: int, entry: Any) -> ExportConfig:
        try:
            return ExportConfig.model_validate(entry)
        except ValidationError as e:
            config_id = coerce_config_id(entry.get("id")) if isinstance(entry, dict) else None
            if config_id is None:
                raise StorageError(f"Persisted export config #{index} is unreadable: {e}") from e

        # Keep configs that an unvalidated update broke; the next export reports it
        logger.warning("invalid_export_config_restored", config_id=str(config_id))
        return ExportConfig.model_construct(**{**entry, "id": config_id})

    async def _commit(self, configs: dict[UUID, ExportConfig]) -> None:
        payload = json.dumps(
            [config.model_dump(mode="json", warnings=False) for config in configs.values()],
            ensure_ascii=False,
        )
        await self._storage.set(self._key, payload)
        self._configs = configs

    async def create(self, draft: Union[ExportConfigDraft, dict]) -> ExportConfig:
        """
        Add a config, assigning its id and creation time.

        Raises:
            ValidationError: If a dict draft does not match ExportConfigDraft
            StorageError: If the config list cannot be persisted
        """
        if not isinstance(draft, ExportConfigDraft):
            draft = ExportConfigDraft.model_validate(draft)

        config = ExportConfig.model_validate(
            draft.model_dump(include=set(ExportConfigDraft.model_fields))
        )
        configs = dict(self._configs)
        configs[config.id] = config
        await self._commit(configs)
        return config

    async def update(self, config_id: ConfigId, changes: dict[str, Any]) -> ExportConfig:
        """
        Shallow-merge changes into a config. Values are not validated.

        The id cannot be changed; an "id" entry in changes is ignored.

        Raises:
            ConfigNotFoundError: If no config has this id
            ValueError: If changes name a field configs do not have
        """
        current = self.get(config_id)

        changes = {name: value for name, value in changes.items() if name != "id"}
        unknown = set(changes) - set(ExportConfig.model_fields)
        if unknown:
            raise ValueError(f"Unknown export config fields: {', '.join(sorted(unknown))}")

        updated = current.model_copy(update=changes)
        configs = dict(self._configs)
        configs[updated.id] = updated
        await self._commit(configs)
        return updated

    async def delete(self, config_id: ConfigId) -> bool:
        """
        Remove a config.

        Returns:
            True if a config was removed, False if the id was unknown
        """
        key = coerce_config_id(config_id)
        if key is None or key not in self._configs:
            return False

        configs = dict(self._configs)
        del configs[key]
        await self._commit(configs)
        return True

    def get(self, config_id: ConfigId) -> ExportConfig:
        """
        Look up a config by id.

        Raises:
            ConfigNotFoundError: If no config has this id
        """
        key = coerce_config_id(config_id)
        config = self._configs.get(key) if key is not None else None
        if config is None:
            raise ConfigNotFoundError(config_id)
        return config

    def list(self) -> list[ExportConfig]:
        """All configs, in creation order."""
        return list(self._configs.values())

    async def mark_exported(self, config_id: ConfigId, exported_at: datetime) -> ExportConfig:
        """Record a successful export of a config."""
        return await self.update(config_id, {"last_exported": exported_at})

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, config_id: object) -> bool:
        key = coerce_config_id(config_id)
        return key is not None and key in self._configs
