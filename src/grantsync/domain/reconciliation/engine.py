"""Run coordinator: one ``synchronize`` call per batch of source rows."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from grantsync.domain import columns as c
from grantsync.domain.builders import build_primary_funder, build_user
from grantsync.domain.errors import ConfigMismatchError
from grantsync.domain.model import SyncMode

from .aggregator import GrantAggregator
from .profiles import DEFAULT_PROFILE
from .reconciler import Reconciler
from .state import RunState

if TYPE_CHECKING:
    from collections.abc import Sequence

    from grantsync.domain.model import Grant, StoreRef
    from grantsync.domain.ports import Row, StoreClient

    from .profiles import DeploymentProfile
    from .statistics import Statistics

log = getLogger(__name__)

MODE_MARKER_COLUMNS: Final[dict[SyncMode, str]] = {
    SyncMode.GRANT: c.GRANT_MODE_MARKER,
    SyncMode.USER: c.USER_MODE_MARKER,
    SyncMode.FUNDER: c.FUNDER_MODE_MARKER,
}


@dataclass(slots=True)
class SyncResult:
    """Outcome of one run; ``latest_timestamp`` bounds the next incremental query."""

    statistics: Statistics
    latest_timestamp: str
    grant_refs: dict[StoreRef, Grant]

    def report(self) -> str:
        return self.statistics.report()


def check_mode(rows: Sequence[Row], mode: SyncMode) -> None:
    """Fail fast when the first row lacks the column ``mode`` always carries."""

    if not rows:
        return
    marker = MODE_MARKER_COLUMNS[mode]
    if marker not in rows[0]:
        raise ConfigMismatchError(
            f"Mode of {mode.value} was supplied, but data does not seem to match "
            f"(first row has no {marker} column)."
        )


class SyncEngine:
    """Reconcile source rows into ``store``.

    One engine may serve many sequential runs; each call builds its own
    ``RunState``. Concurrent calls on one engine are not supported.
    """

    def __init__(
        self,
        store: StoreClient,
        *,
        profile: DeploymentProfile = DEFAULT_PROFILE,
        policy_base_url: str | None = None,
    ) -> None:
        self.store = store
        self.profile = profile
        self.policy_base_url = policy_base_url

    def synchronize(self, rows: Sequence[Row], mode: SyncMode | str) -> SyncResult:
        sync_mode = SyncMode(mode)
        check_mode(rows, sync_mode)

        state = RunState(mode=sync_mode)
        reconciler = Reconciler(
            self.store,
            self.profile,
            mode=sync_mode,
            statistics=state.statistics,
        )
        if sync_mode is SyncMode.GRANT:
            entities = self._sync_grants(rows, reconciler, state)
        elif sync_mode is SyncMode.USER:
            entities = self._sync_users(rows, reconciler, state)
        else:
            entities = self._sync_funders(rows, reconciler, state)

        state.statistics.finalize(
            rows=len(rows),
            entities=entities,
            latest_timestamp=state.watermark.latest,
        )
        if entities == 0:
            log.info("No records were processed in this update")
        return SyncResult(
            statistics=state.statistics,
            latest_timestamp=state.watermark.latest,
            grant_refs=state.grant_refs,
        )

    def _sync_grants(self, rows: Sequence[Row], reconciler: Reconciler, state: RunState) -> int:
        aggregator = GrantAggregator(reconciler, state, policy_base_url=self.policy_base_url)
        return len(aggregator.run(rows))

    def _sync_users(self, rows: Sequence[Row], reconciler: Reconciler, state: RunState) -> int:
        log.info("Processing result set with %s rows", len(rows))
        for row in rows:
            reconciler.reconcile_user(build_user(row, domain=self.profile.domain))
            state.watermark.fold(row.get(c.C_UPDATE_TIMESTAMP))
        return len(rows)

    def _sync_funders(self, rows: Sequence[Row], reconciler: Reconciler, state: RunState) -> int:
        log.info("Processing result set with %s rows", len(rows))
        for row in rows:
            reconciler.reconcile_funder(
                build_primary_funder(row, policy_base_url=self.policy_base_url)
            )
            state.watermark.fold(row.get(c.C_UPDATE_TIMESTAMP))
        return len(rows)


__all__ = ["MODE_MARKER_COLUMNS", "SyncEngine", "SyncResult", "check_mode"]
