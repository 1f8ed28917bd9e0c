"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "grantsync"
DEFAULT_STORE_FILENAME: Final[str] = "grantsync.db"
UPDATES_FILENAME_TEMPLATE: Final[str] = "{mode}_updates.txt"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    store_filename: str = DEFAULT_STORE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def store_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.store_filename

    def updates_path(self, mode: str, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / UPDATES_FILENAME_TEMPLATE.format(mode=mode)

    def store_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.store_path()}"


@dataclass(frozen=True, slots=True)
class StoreConfig:
    uri: str


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("GRANTSYNC_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_store_config(*, storage: StorageConfig | None = None) -> StoreConfig:
    env_uri = os.getenv("GRANTSYNC_STORE_URI")
    if env_uri:
        return StoreConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return StoreConfig(uri=storage_config.store_uri())
