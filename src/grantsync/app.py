"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from grantsync.adapters.rowfile import read_row_file, write_row_file
from grantsync.adapters.sqlalchemy import build_sql_row_source, create_store
from grantsync.adapters.updates_file import UpdatesFile
from grantsync.config import (
    get_source_config,
    get_storage_config,
    get_store_config,
    get_sync_config,
)
from grantsync.domain.reconciliation import SyncEngine, get_profile

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from grantsync.config import StorageConfig
    from grantsync.domain.model import SyncMode
    from grantsync.domain.ports import Row, RowSource, StoreClient
    from grantsync.domain.reconciliation import SyncResult

log = getLogger(__name__)

DEFAULT_START_TIMESTAMP: Final = "1980-01-01 00:00:00.0"


def build_engine(
    *,
    store: StoreClient | None = None,
    deployment: str | None = None,
) -> SyncEngine:
    """Assemble a ``SyncEngine`` from configuration, defaulting to the SQL store."""

    config = get_sync_config(deployment=deployment)
    effective_store = store or create_store(get_store_config().uri)
    return SyncEngine(
        effective_store,
        profile=get_profile(config.deployment),
        policy_base_url=config.policy_base_url,
    )


def updates_file_for(mode: SyncMode, storage: StorageConfig | None = None) -> UpdatesFile:
    storage_config = storage or get_storage_config()
    return UpdatesFile(storage_config.updates_path(mode.value))


def resolve_start(
    mode: SyncMode,
    start: str | None = None,
    *,
    storage: StorageConfig | None = None,
) -> str:
    """Explicit start wins; otherwise continue from the last recorded watermark."""

    if start:
        return start
    return updates_file_for(mode, storage).latest() or DEFAULT_START_TIMESTAMP


def fetch_rows(
    *,
    mode: SyncMode,
    start: str | None = None,
    end: str | None = None,
    source: RowSource | None = None,
    storage: StorageConfig | None = None,
) -> tuple[list[Row], str]:
    effective_start = resolve_start(mode, start, storage=storage)
    effective_source = source or build_sql_row_source(get_source_config(), (mode,))
    rows = effective_source(mode=mode, start=effective_start, end=end)
    return rows, effective_start


def pull_rows(
    path: Path,
    *,
    mode: SyncMode,
    start: str | None = None,
    end: str | None = None,
    source: RowSource | None = None,
    storage: StorageConfig | None = None,
) -> Path:
    """Query the grants database and save the rows for a later ``load``."""

    rows, effective_start = fetch_rows(
        mode=mode, start=start, end=end, source=source, storage=storage
    )
    return write_row_file(path, rows, mode=mode, start=effective_start, end=end)


def synchronize_rows(
    rows: Sequence[Row],
    *,
    mode: SyncMode,
    engine: SyncEngine | None = None,
    storage: StorageConfig | None = None,
    record_watermark: bool = True,
) -> SyncResult:
    """Run one synchronization and persist its watermark on success."""

    effective_engine = engine or build_engine()
    log.info(
        "Starting %s sync: rows=%s, deployment=%s",
        mode.value,
        len(rows),
        effective_engine.profile.name,
    )
    result = effective_engine.synchronize(rows, mode)
    if record_watermark and result.latest_timestamp:
        updates_file_for(mode, storage).append(result.latest_timestamp)
    log.info("Finished %s sync\n%s", mode.value, result.report())
    return result


def load_rows(
    path: Path,
    *,
    mode: SyncMode | None = None,
    engine: SyncEngine | None = None,
    storage: StorageConfig | None = None,
) -> SyncResult:
    """Synchronize rows previously saved by ``pull_rows``."""

    payload = read_row_file(path)
    effective_mode = mode or payload.mode
    return synchronize_rows(payload.rows, mode=effective_mode, engine=engine, storage=storage)


def sync_from_source(
    *,
    mode: SyncMode,
    start: str | None = None,
    end: str | None = None,
    source: RowSource | None = None,
    engine: SyncEngine | None = None,
    storage: StorageConfig | None = None,
) -> SyncResult:
    """Pull from the grants database and load straight into the store."""

    rows, _ = fetch_rows(mode=mode, start=start, end=end, source=source, storage=storage)
    return synchronize_rows(rows, mode=mode, engine=engine, storage=storage)


__all__ = [
    "DEFAULT_START_TIMESTAMP",
    "build_engine",
    "fetch_rows",
    "load_rows",
    "pull_rows",
    "resolve_start",
    "sync_from_source",
    "synchronize_rows",
    "updates_file_for",
]
