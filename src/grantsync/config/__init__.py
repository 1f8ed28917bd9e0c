"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .logging import configure_logging
from .storage import StorageConfig, StoreConfig, get_storage_config, get_store_config
from .sync import (
    DEFAULT_DEPLOYMENT,
    SourceConfig,
    SyncConfig,
    get_source_config,
    get_sync_config,
)

__all__ = [
    "DEFAULT_DEPLOYMENT",
    "ConfigurationError",
    "MissingConfigurationError",
    "SourceConfig",
    "StorageConfig",
    "StoreConfig",
    "SyncConfig",
    "configure_logging",
    "get_source_config",
    "get_storage_config",
    "get_store_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_vars",
]
