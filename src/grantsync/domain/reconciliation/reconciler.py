"""Create-or-update protocol between freshly built entities and the store.

For every entity the reconciler
1) namespaces the local key (``domain:type:raw``) and writes it back,
2) looks up an existing record (users by locator id, in priority order),
3) reads the stored record and asks the merge policy for an update, or
4) creates the record when none exists, subject to the per-type policy.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from grantsync.domain.errors import SourceFormatError, StoreInconsistencyError
from grantsync.domain.model import EntityType, Funder, Grant, Identifier, SyncMode, User
from grantsync.domain.ports import ResourceNotFoundError

from .merge import ensure_submitter

if TYPE_CHECKING:
    from grantsync.domain.model import StoreEntity, StoreRef
    from grantsync.domain.ports import StoreClient

    from .profiles import DeploymentProfile
    from .statistics import Statistics

log = getLogger(__name__)

LOCAL_KEY_ATTRIBUTE = "local_key"
LOCATOR_IDS_ATTRIBUTE = "locator_ids"


class Reconciler:
    """Reconcile one entity at a time against ``store`` for a single run."""

    def __init__(
        self,
        store: StoreClient,
        profile: DeploymentProfile,
        *,
        mode: SyncMode,
        statistics: Statistics,
    ) -> None:
        self.store = store
        self.profile = profile
        self.mode = mode
        self.statistics = statistics

    def namespaced_key(self, entity_type: EntityType, raw_key: str) -> str:
        return Identifier(self.profile.domain, entity_type.value, raw_key).serialize()

    def reconcile_funder(self, funder: Funder) -> StoreRef | None:
        if funder.local_key is None:
            log.debug("Skipping funder without local key")
            return None
        funder.local_key = self.namespaced_key(EntityType.FUNDER, funder.local_key)
        ref = self.store.find_by_attribute(Funder, LOCAL_KEY_ATTRIBUTE, funder.local_key)
        if ref is not None:
            stored = self._read(ref, Funder)
            updated = self.profile.merge_policy.merge(funder, stored)
            if updated is not None:
                self.store.update_resource(updated)
                self.statistics.funders_updated += 1
                log.debug("Updated funder %s", funder.local_key)
            return ref

        if not funder.name:
            log.debug("Skipping unnamed funder %s", funder.local_key)
            return None
        ref = self.store.create_resource(funder)
        self.statistics.funders_created += 1
        log.debug("Created funder %s as %s", funder.local_key, ref)
        return ref

    def reconcile_user(self, user: User) -> StoreRef | None:
        ref = self._find_user(user)
        if ref is not None:
            stored = self._read(ref, User)
            updated = self.profile.merge_policy.merge(user, stored)
            if updated is not None:
                self.store.update_resource(ensure_submitter(updated))
                self.statistics.users_updated += 1
                log.debug("Updated user %s", ref)
            return ref

        if self.mode is SyncMode.USER:
            # user mode refreshes known users only
            log.debug("No stored user for %s, leaving unresolved", user.locator_ids)
            return None
        ref = self.store.create_resource(user)
        self.statistics.users_created += 1
        log.debug("Created user %s as %s", user.locator_ids, ref)
        return ref

    def reconcile_grant(self, grant: Grant) -> StoreRef:
        if grant.local_key is None:
            raise SourceFormatError(
                f"Grant without local key (award number {grant.award_number!r})"
            )
        grant.local_key = self.namespaced_key(EntityType.GRANT, grant.local_key)
        log.debug("Looking for grant with local key %s", grant.local_key)
        ref = self.store.find_by_attribute(Grant, LOCAL_KEY_ATTRIBUTE, grant.local_key)
        if ref is not None:
            stored = self._read(ref, Grant)
            updated = self.profile.merge_policy.merge(grant, stored)
            if updated is not None:
                self.store.update_resource(updated)
                self.statistics.grants_updated += 1
                log.debug("Updated grant %s", grant.local_key)
            return ref

        ref = self.store.create_resource(grant)
        self.statistics.grants_created += 1
        log.debug("Created grant %s as %s", grant.local_key, ref)
        return ref

    def _find_user(self, user: User) -> StoreRef | None:
        for locator_id in user.locator_ids:
            ref = self.store.find_by_attribute(User, LOCATOR_IDS_ATTRIBUTE, locator_id)
            if ref is not None:
                return ref
        return None

    def _read[TEntity: StoreEntity](self, ref: StoreRef, entity_type: type[TEntity]) -> TEntity:
        try:
            return self.store.read_resource(ref, entity_type)
        except ResourceNotFoundError as exc:
            raise StoreInconsistencyError(
                f"Could not read {entity_type.__name__} with reference {ref}"
            ) from exc


__all__ = ["LOCAL_KEY_ATTRIBUTE", "LOCATOR_IDS_ATTRIBUTE", "Reconciler"]
