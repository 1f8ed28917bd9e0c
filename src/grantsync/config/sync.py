"""Synchronization settings: deployment variant, policy base URL and source access."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var, require_env_vars

DEFAULT_DEPLOYMENT: Final[str] = "default"


@dataclass(frozen=True, slots=True)
class SyncConfig:
    deployment: str = DEFAULT_DEPLOYMENT
    policy_base_url: str | None = None


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Connection URI and directory holding one ``<mode>.sql`` statement per mode."""

    uri: str
    query_dir: Path

    def query_path(self, mode: str) -> Path:
        return self.query_dir / f"{mode}.sql"

    @classmethod
    def from_environment(cls) -> SourceConfig:
        values = require_env_vars(("GRANTSYNC_SOURCE_URI", "GRANTSYNC_QUERY_DIR"))
        return cls(
            uri=values["GRANTSYNC_SOURCE_URI"],
            query_dir=Path(values["GRANTSYNC_QUERY_DIR"]).expanduser(),
        )


def get_sync_config(*, deployment: str | None = None) -> SyncConfig:
    return SyncConfig(
        deployment=deployment or optional_env_var("GRANTSYNC_DEPLOYMENT") or DEFAULT_DEPLOYMENT,
        policy_base_url=optional_env_var("GRANTSYNC_POLICY_BASE_URL"),
    )


def get_source_config() -> SourceConfig:
    return SourceConfig.from_environment()
