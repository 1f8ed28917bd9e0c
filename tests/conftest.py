from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from grantsync.adapters.memory import InMemoryStore
from grantsync.adapters.sqlalchemy import SqlAlchemyStore, create_store
from grantsync.config import StorageConfig
from grantsync.domain.reconciliation import SyncEngine

os.environ.setdefault("GRANTSYNC_STORE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

POLICY_BASE_URL = "https://pass.example.edu/fcrepo/rest/"


@pytest.fixture
def memory_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def sync_engine(memory_store: InMemoryStore) -> SyncEngine:
    return SyncEngine(memory_store, policy_base_url=POLICY_BASE_URL)


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: Engine) -> SqlAlchemyStore:
    return create_store("sqlite+pysqlite:///:memory:", engine=sqlite_engine)


@pytest.fixture
def storage_config(tmp_path: Path) -> StorageConfig:
    return StorageConfig(data_dir=tmp_path / "data")
