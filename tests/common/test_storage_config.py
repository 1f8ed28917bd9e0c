from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest  # noqa: TC002

from grantsync.config import StorageConfig, get_storage_config, get_store_config


def test_get_storage_config_prefers_explicit_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    custom = tmp_path / "custom-data"
    monkeypatch.setenv("GRANTSYNC_DATA_DIR", str(custom))

    config = get_storage_config()

    assert config.resolve_data_dir() == custom.resolve()


def test_get_store_config_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GRANTSYNC_STORE_URI", "sqlite:///override.db")

    assert get_store_config().uri == "sqlite:///override.db"


def test_get_store_config_creates_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("GRANTSYNC_STORE_URI", raising=False)
    monkeypatch.setenv("GRANTSYNC_DATA_DIR", str(tmp_path / "data-dir"))

    uri = get_store_config().uri

    expected_path = (tmp_path / "data-dir" / "grantsync.db").resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_updates_path_is_per_mode(storage_config: StorageConfig) -> None:
    path = storage_config.updates_path("funder")

    assert path.name == "funder_updates.txt"
    assert path.parent.exists()
