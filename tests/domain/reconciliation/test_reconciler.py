from __future__ import annotations

import pytest

from grantsync.adapters.memory import InMemoryStore
from grantsync.domain.errors import SourceFormatError
from grantsync.domain.model import EntityType, Funder, Grant, SyncMode, User, UserRole
from grantsync.domain.reconciliation import DEFAULT_PROFILE, Reconciler, Statistics


@pytest.fixture
def statistics() -> Statistics:
    return Statistics(mode=SyncMode.GRANT)


def _reconciler(
    store: InMemoryStore, statistics: Statistics, mode: SyncMode = SyncMode.GRANT
) -> Reconciler:
    return Reconciler(store, DEFAULT_PROFILE, mode=mode, statistics=statistics)


def test_namespaced_key_uses_profile_domain(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    reconciler = _reconciler(memory_store, statistics)

    assert reconciler.namespaced_key(EntityType.FUNDER, "F1") == "default.domain:funder:F1"


def test_reconcile_funder_writes_namespaced_key_back(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    funder = Funder(local_key="F1", name="NSF")

    ref = _reconciler(memory_store, statistics).reconcile_funder(funder)

    assert funder.local_key == "default.domain:funder:F1"
    assert memory_store.read_resource(ref or "", Funder).local_key == funder.local_key
    assert statistics.funders_created == 1


def test_reconcile_funder_finds_existing_record(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    existing = memory_store.create_resource(
        Funder(local_key="default.domain:funder:F1", name="NSF")
    )

    ref = _reconciler(memory_store, statistics).reconcile_funder(Funder(local_key="F1"))

    assert ref == existing
    assert statistics.funders_created == 0
    assert statistics.funders_updated == 0


def test_reconcile_unnamed_new_funder_is_skipped(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    assert _reconciler(memory_store, statistics).reconcile_funder(Funder(local_key="F1")) is None
    assert memory_store.writes() == []


def test_reconcile_user_stops_at_first_matching_locator(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    by_email = memory_store.create_resource(User(locator_ids=["d:email:ada"]))
    memory_store.create_resource(User(locator_ids=["d:eppn:ada"]))
    candidate = User(
        locator_ids=["d:employeeid:E1", "d:email:ada", "d:eppn:ada"],
        roles={UserRole.SUBMITTER},
    )

    ref = _reconciler(memory_store, statistics).reconcile_user(candidate)

    assert ref == by_email
    finds = [call.target for call in memory_store.calls if call.operation == "find"]
    assert finds == [
        "User.locator_ids=d:employeeid:E1",
        "User.locator_ids=d:email:ada",
    ]
    updated = memory_store.read_resource(by_email, User)
    assert updated.roles == {UserRole.SUBMITTER}
    assert statistics.users_updated == 1


def test_reconcile_user_in_user_mode_leaves_unknown_users_unresolved(
    memory_store: InMemoryStore,
) -> None:
    statistics = Statistics(mode=SyncMode.USER)
    reconciler = _reconciler(memory_store, statistics, mode=SyncMode.USER)

    assert reconciler.reconcile_user(User(locator_ids=["d:employeeid:E1"])) is None
    assert statistics.users_created == 0


def test_reconcile_grant_creates_then_updates(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    reconciler = _reconciler(memory_store, statistics)
    created = reconciler.reconcile_grant(Grant(local_key="G1", project_name="Old"))

    updated = reconciler.reconcile_grant(Grant(local_key="G1", project_name="New"))

    assert created == updated
    assert memory_store.read_resource(created, Grant).project_name == "New"
    assert statistics.grants_created == 1
    assert statistics.grants_updated == 1


def test_reconcile_funder_without_key_is_skipped(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    reconciler = _reconciler(memory_store, statistics)

    assert reconciler.reconcile_funder(Funder(local_key=None, name="Anonymous")) is None
    assert memory_store.calls == []


def test_reconcile_grant_without_key_is_rejected(
    memory_store: InMemoryStore, statistics: Statistics
) -> None:
    reconciler = _reconciler(memory_store, statistics)

    with pytest.raises(SourceFormatError, match="without local key"):
        reconciler.reconcile_grant(Grant(local_key=None, award_number="A-1"))
    assert memory_store.calls == []
