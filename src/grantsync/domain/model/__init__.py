"""Public domain model surface."""

from __future__ import annotations

from grantsync.domain.model.entities import Funder, Grant, StoreEntity, StoreRef, User
from grantsync.domain.model.enums import (
    AwardStatus,
    EntityType,
    InvestigatorRole,
    SyncMode,
    UserRole,
)
from grantsync.domain.model.identifier import EMPLOYEE_ID_TYPE, Identifier

__all__ = [  # noqa: RUF022
    # entities
    "StoreEntity",
    "StoreRef",
    "Funder",
    "User",
    "Grant",
    # identifiers
    "Identifier",
    "EMPLOYEE_ID_TYPE",
    # enums
    "AwardStatus",
    "EntityType",
    "InvestigatorRole",
    "SyncMode",
    "UserRole",
]
