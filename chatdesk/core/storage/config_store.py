"""Provider configuration store.

Keeps the configuration list and the active-configuration pointer in an
injected key/value backend under two keys.
"""

import logging
from typing import Any

from chatdesk.core.exceptions import ConfigNotFoundError
from chatdesk.core.provider_config import ProviderConfig

from . import KeyValueStore

logger = logging.getLogger(__name__)

CONFIGS_KEY = "apiConfigs"
ACTIVE_CONFIG_KEY = "activeConfigId"


class ConfigStore:
    """Durable mapping from configuration id to ProviderConfig.

    Every read goes back to the backend, so callers get a fresh snapshot
    per call and never share mutable state with the store.
    """

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend

    def _records(self) -> list[dict[str, Any]]:
        records = self._backend.get(CONFIGS_KEY, [])
        if not isinstance(records, list):
            logger.warning("Ignoring malformed %s value in config store", CONFIGS_KEY)
            return []
        return [record for record in records if isinstance(record, dict)]

    def get_configs(self) -> list[ProviderConfig]:
        return [ProviderConfig.from_dict(record) for record in self._records()]

    def find_config(self, config_id: str | None) -> ProviderConfig | None:
        if not config_id:
            return None
        for record in self._records():
            if record.get("id") == config_id:
                return ProviderConfig.from_dict(record)
        return None

    def get_config(self, config_id: str | None) -> ProviderConfig:
        """Resolve an id to its configuration.

        Raises:
            ConfigNotFoundError: If no configuration has that id
        """
        config = self.find_config(config_id)
        if config is None:
            raise ConfigNotFoundError(config_id)
        return config

    def save_config(self, config: ProviderConfig) -> None:
        """Insert a new configuration or replace the one with the same id."""
        records = self._records()
        record = config.to_dict()
        for index, existing in enumerate(records):
            if existing.get("id") == config.id:
                records[index] = record
                logger.debug("Updated configuration %s (%s)", config.id, config.provider_name)
                break
        else:
            records.append(record)
            logger.debug("Added configuration %s (%s)", config.id, config.provider_name)
        self._backend.set(CONFIGS_KEY, records)

    def delete_config(self, config_id: str) -> bool:
        """Remove a configuration; clears the active pointer if it pointed at it.

        Returns:
            True if a configuration was removed
        """
        records = self._records()
        remaining = [record for record in records if record.get("id") != config_id]
        removed = len(remaining) != len(records)
        self._backend.set(CONFIGS_KEY, remaining)

        if removed and self.get_active_config_id() == config_id:
            logger.info("Deleted the active configuration %s; clearing the active pointer", config_id)
            self._backend.delete(ACTIVE_CONFIG_KEY)
        return removed

    def get_active_config_id(self) -> str | None:
        active = self._backend.get(ACTIVE_CONFIG_KEY)
        return active if isinstance(active, str) and active else None

    def set_active_config_id(self, config_id: str | None) -> None:
        """Point at the active configuration.

        The id is not checked against the stored configurations; pointing at
        an unknown id is a caller error surfaced later as ConfigNotFoundError.
        """
        if config_id:
            self._backend.set(ACTIVE_CONFIG_KEY, config_id)
        else:
            self._backend.delete(ACTIVE_CONFIG_KEY)

    def get_active_config(self) -> ProviderConfig | None:
        return self.find_config(self.get_active_config_id())
