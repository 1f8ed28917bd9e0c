from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from grantsync import app
from grantsync.adapters.sqlalchemy import create_store
from grantsync.adapters.sqlalchemy.mappings import (
    funder_table,
    grant_co_pi_table,
    grant_table,
    user_table,
)
from grantsync.domain.model import AwardStatus, Grant, SyncMode, User, UserRole
from grantsync.domain.reconciliation import SyncEngine
from tests.conftest import POLICY_BASE_URL
from tests.helpers.rows import grant_row, user_row
from tests.helpers.sources import FakeRowSource

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.engine import Engine

    from grantsync.adapters.sqlalchemy import SqlAlchemyStore
    from grantsync.config import StorageConfig


def _count(engine: Engine, table: Table) -> int:
    with engine.connect() as connection:
        return connection.execute(select(func.count()).select_from(table)).scalar_one()


def test_grant_sync_persists_aggregated_grant(
    sql_store: SqlAlchemyStore, storage_config: StorageConfig
) -> None:
    engine = SyncEngine(sql_store, policy_base_url=POLICY_BASE_URL)
    source = FakeRowSource(
        rows=[
            grant_row("G1", employee_id="E1", role="P", timestamp="2020-01-01 00:00:00.0"),
            grant_row("G1", employee_id="E2", role="C", timestamp="2020-01-02 00:00:00.0"),
        ]
    )

    result = app.sync_from_source(
        mode=SyncMode.GRANT, source=source, engine=engine, storage=storage_config
    )

    assert _count(sql_store.engine, grant_table) == 1
    assert _count(sql_store.engine, funder_table) == 1
    assert _count(sql_store.engine, user_table) == 2
    assert _count(sql_store.engine, grant_co_pi_table) == 1

    (grant_ref,) = result.grant_refs
    grant = sql_store.read_resource(grant_ref, Grant)
    pi_ref = sql_store.find_by_attribute(User, "locator_ids", "default.domain:employeeid:E1")
    co_pi_ref = sql_store.find_by_attribute(User, "locator_ids", "default.domain:employeeid:E2")
    assert grant.local_key == "default.domain:grant:G1"
    assert grant.award_status is AwardStatus.ACTIVE
    assert grant.pi == pi_ref
    assert grant.co_pis == [co_pi_ref]
    assert grant.direct_funder == grant.primary_funder
    assert app.updates_file_for(SyncMode.GRANT, storage_config).latest() == "2020-01-02 00:00:00.0"


def test_repeated_grant_sync_is_idempotent(
    sql_store: SqlAlchemyStore, storage_config: StorageConfig
) -> None:
    engine = SyncEngine(sql_store, policy_base_url=POLICY_BASE_URL)
    rows = [
        grant_row("G1", employee_id="E1", role="P"),
        grant_row("G1", employee_id="E2", role="K"),
        grant_row(
            "G2", employee_id="E2", role="P", primary_funder="F9", primary_funder_name="Prime"
        ),
    ]

    engine.synchronize(rows, SyncMode.GRANT)
    second = engine.synchronize(rows, SyncMode.GRANT)

    stats = second.statistics
    assert (stats.grants_created, stats.grants_updated) == (0, 0)
    assert (stats.funders_created, stats.funders_updated) == (0, 0)
    assert (stats.users_created, stats.users_updated) == (0, 0)
    assert _count(sql_store.engine, grant_table) == 2
    assert _count(sql_store.engine, funder_table) == 2


def test_user_sync_refreshes_users_created_by_grant_sync(sqlite_engine: Engine) -> None:
    store = create_store("sqlite+pysqlite:///:memory:", engine=sqlite_engine)
    engine = SyncEngine(store, policy_base_url=POLICY_BASE_URL)
    engine.synchronize([grant_row("G1", employee_id="E1")], SyncMode.GRANT)

    result = engine.synchronize(
        [user_row("E1", first_name="Augusta", email="augusta@example.edu"), user_row("E5")],
        SyncMode.USER,
    )

    ref = store.find_by_attribute(User, "locator_ids", "default.domain:employeeid:E1")
    assert ref is not None
    user = store.read_resource(ref, User)
    assert user.first_name == "Augusta"
    assert user.email == "augusta@example.edu"
    assert user.roles == {UserRole.SUBMITTER}
    assert result.statistics.users_updated == 1
    assert result.statistics.users_created == 0
    assert _count(sqlite_engine, user_table) == 1
