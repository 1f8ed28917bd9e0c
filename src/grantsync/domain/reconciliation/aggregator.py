"""Collapse grant-mode rows into one Grant per grant key.

A grant appears once per investigator in the source, so its rows are folded
together: the first row supplies the scalar fields and funders, every row
contributes its investigator.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from grantsync.domain import columns as c
from grantsync.domain.builders import (
    build_direct_funder,
    build_grant,
    build_primary_funder,
    build_user,
    investigator_role_for,
)
from grantsync.domain.errors import SourceFormatError
from grantsync.domain.model import InvestigatorRole

if TYPE_CHECKING:
    from collections.abc import Sequence

    from grantsync.domain.model import Grant
    from grantsync.domain.ports import Row

    from .reconciler import Reconciler
    from .state import RunState

log = getLogger(__name__)


class GrantAggregator:
    def __init__(
        self,
        reconciler: Reconciler,
        state: RunState,
        *,
        policy_base_url: str | None = None,
    ) -> None:
        self.reconciler = reconciler
        self.state = state
        self.policy_base_url = policy_base_url
        self.grants: dict[str, Grant] = {}

    def run(self, rows: Sequence[Row]) -> dict[str, Grant]:
        log.info("Processing result set with %s rows", len(rows))
        for row in rows:
            self.add_row(row)
        self.flush()
        return self.grants

    def add_row(self, row: Row) -> Grant:
        grant_key = row.get(c.C_GRANT_LOCAL_KEY)
        if grant_key is None:
            raise SourceFormatError(f"Grant row without {c.C_GRANT_LOCAL_KEY} value")
        log.debug("Processing grant with local key %s", grant_key)
        grant = self.grants.get(grant_key)
        if grant is None:
            grant = self._start_grant(row)
            self.grants[grant_key] = grant

        self._add_investigator(grant, row)
        self.state.watermark.fold(row.get(c.C_UPDATE_TIMESTAMP))
        return grant

    def flush(self) -> None:
        """Reconcile every aggregated grant, recording its reference for audit."""

        for grant in self.grants.values():
            ref = self.reconciler.reconcile_grant(grant)
            self.state.grant_refs[ref] = grant

    def _start_grant(self, row: Row) -> Grant:
        grant = build_grant(row)
        cache = self.state.cache

        direct_key = row.get(c.C_DIRECT_FUNDER_LOCAL_KEY)
        primary_key = row.get(c.C_PRIMARY_FUNDER_LOCAL_KEY)
        if primary_key is None:
            # the direct sponsor is also the prime sponsor
            primary_key = direct_key

        grant.direct_funder = cache.resolve_funder(
            direct_key,
            lambda: self.reconciler.reconcile_funder(
                build_direct_funder(row, policy_base_url=self.policy_base_url)
            ),
        )
        # a shared key is already cached by the direct lookup above
        grant.primary_funder = cache.resolve_funder(
            primary_key,
            lambda: self.reconciler.reconcile_funder(
                build_primary_funder(row, policy_base_url=self.policy_base_url)
            ),
        )
        grant.co_pis = []
        return grant

    def _add_investigator(self, grant: Grant, row: Row) -> None:
        employee_id = row.get(c.C_USER_EMPLOYEE_ID)
        role = investigator_role_for(row.get(c.C_ABBREVIATED_ROLE))

        # Rows with an unrecognised role are still resolved while the grant has
        # no PI, but they are not assigned to the grant.
        if not (role.is_co_investigator or grant.pi is None):
            return

        ref = self.state.cache.resolve_user(
            employee_id,
            lambda: self.reconciler.reconcile_user(
                build_user(row, domain=self.reconciler.profile.domain)
            ),
        )
        if role is InvestigatorRole.PI:
            grant.pi = ref
            self.state.statistics.pis_added += 1
        elif role.is_co_investigator and ref is not None and grant.add_co_pi(ref):
            self.state.statistics.co_pis_added += 1
