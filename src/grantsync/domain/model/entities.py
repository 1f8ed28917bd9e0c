"""Value objects exchanged with the store.

Instances are built from source rows, handed to the reconciler and then
dropped; only the store references they resolve to outlive a row.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from grantsync.domain.model.enums import AwardStatus, EntityType, UserRole

if TYPE_CHECKING:
    from datetime import datetime

type StoreRef = str


@dataclass(kw_only=True)
class StoreEntity:
    ENTITY_TYPE: ClassVar[EntityType]

    id: StoreRef | None = None

    @property
    def entity_type(self) -> EntityType:
        return self.ENTITY_TYPE


@dataclass(kw_only=True)
class Funder(StoreEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.FUNDER

    local_key: str | None = None
    name: str | None = None
    policy: str | None = None


@dataclass(kw_only=True)
class User(StoreEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.USER

    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    email: str | None = None
    # most reliable identifier first; lookups stop at the first hit
    locator_ids: list[str] = field(default_factory=list[str])
    roles: set[UserRole] = field(default_factory=set[UserRole])


@dataclass(kw_only=True)
class Grant(StoreEntity):
    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GRANT

    local_key: str | None = None
    award_number: str | None = None
    award_status: AwardStatus | None = None
    project_name: str | None = None
    award_date: datetime | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    direct_funder: StoreRef | None = None
    primary_funder: StoreRef | None = None
    pi: StoreRef | None = None
    co_pis: list[StoreRef] = field(default_factory=list[StoreRef])

    def add_co_pi(self, ref: StoreRef) -> bool:
        """Append ``ref`` unless already present; report whether it was added."""

        if ref in self.co_pis:
            return False
        self.co_pis.append(ref)
        return True
