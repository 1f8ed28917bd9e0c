"""Merge comparators deciding whether a stored record needs an update.

A comparator receives the candidate built from the source and the record read
back from the store. It returns ``None`` when the candidate adds nothing the
stored record does not already reflect, otherwise the record to write back
(the stored record, keeping its reference, with source values applied).
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Any, Final, Protocol, cast

from grantsync.domain.model import Funder, Grant, User, UserRole

if TYPE_CHECKING:
    from grantsync.domain.model import StoreEntity


class MergePolicy(Protocol):
    """Pluggable comparator, substitutable per deployment."""

    def merge[TEntity: StoreEntity](self, candidate: TEntity, stored: TEntity) -> TEntity | None: ...


FUNDER_FIELDS: Final[tuple[str, ...]] = ("local_key", "name", "policy")
USER_FIELDS: Final[tuple[str, ...]] = (
    "first_name",
    "middle_name",
    "last_name",
    "display_name",
    "email",
)
GRANT_FIELDS: Final[tuple[str, ...]] = (
    "local_key",
    "award_number",
    "award_status",
    "project_name",
    "award_date",
    "start_date",
    "end_date",
    "direct_funder",
    "primary_funder",
    "pi",
)


def _changed_fields(
    candidate: StoreEntity,
    stored: StoreEntity,
    fields: tuple[str, ...],
    *,
    keep_stored_when_missing: bool,
) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    for name in fields:
        new_value = getattr(candidate, name)
        if new_value is None and keep_stored_when_missing:
            continue
        if new_value != getattr(stored, name):
            changes[name] = new_value
    return changes


def merged_locator_ids(candidate: list[str], stored: list[str]) -> list[str]:
    """Candidate ids first, in their priority order, then stored ids not yet seen."""

    merged: list[str] = []
    for locator_id in (*candidate, *stored):
        if locator_id not in merged:
            merged.append(locator_id)
    return merged


class FieldMergePolicy:
    """Compare the fields the grants database owns, type by type.

    Funders and users never lose a stored value to a missing source value;
    locator ids and roles only ever grow. Grants are owned entirely by the
    source, so every source field overwrites the stored one.
    """

    def merge[TEntity: StoreEntity](self, candidate: TEntity, stored: TEntity) -> TEntity | None:
        if isinstance(candidate, Funder) and isinstance(stored, Funder):
            return cast("TEntity | None", self.merge_funder(candidate, stored))
        if isinstance(candidate, User) and isinstance(stored, User):
            return cast("TEntity | None", self.merge_user(candidate, stored))
        if isinstance(candidate, Grant) and isinstance(stored, Grant):
            return cast("TEntity | None", self.merge_grant(candidate, stored))
        raise TypeError(
            f"Cannot merge {type(candidate).__name__} into {type(stored).__name__}"
        )

    def merge_funder(self, candidate: Funder, stored: Funder) -> Funder | None:
        changes = _changed_fields(candidate, stored, FUNDER_FIELDS, keep_stored_when_missing=True)
        if not changes:
            return None
        return replace(stored, **changes)

    def merge_user(self, candidate: User, stored: User) -> User | None:
        changes = _changed_fields(candidate, stored, USER_FIELDS, keep_stored_when_missing=True)
        locator_ids = merged_locator_ids(candidate.locator_ids, stored.locator_ids)
        if locator_ids != stored.locator_ids:
            changes["locator_ids"] = locator_ids
        roles = stored.roles | candidate.roles
        if roles != stored.roles:
            changes["roles"] = roles
        if not changes:
            return None
        changes.setdefault("locator_ids", list(stored.locator_ids))
        changes.setdefault("roles", set(stored.roles))
        return replace(stored, **changes)

    def merge_grant(self, candidate: Grant, stored: Grant) -> Grant | None:
        changes = _changed_fields(candidate, stored, GRANT_FIELDS, keep_stored_when_missing=False)
        if candidate.co_pis != stored.co_pis:
            changes["co_pis"] = list(candidate.co_pis)
        if not changes:
            return None
        changes.setdefault("co_pis", list(stored.co_pis))
        return replace(stored, **changes)


def ensure_submitter(user: User) -> User:
    """Add the submitter role if missing; roles are never removed."""

    if UserRole.SUBMITTER not in user.roles:
        user.roles.add(UserRole.SUBMITTER)
    return user


__all__ = [
    "FUNDER_FIELDS",
    "GRANT_FIELDS",
    "USER_FIELDS",
    "FieldMergePolicy",
    "MergePolicy",
    "ensure_submitter",
    "merged_locator_ids",
]
