"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SyncMode(StrEnum):
    GRANT = "grant"
    USER = "user"
    FUNDER = "funder"


class EntityType(StrEnum):
    """Discriminator used for store references and identifier type tags."""

    FUNDER = "funder"
    USER = "user"
    GRANT = "grant"


class AwardStatus(StrEnum):
    ACTIVE = "active"
    PRE_AWARD = "pre-award"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"


class UserRole(StrEnum):
    SUBMITTER = "submitter"
    ADMIN = "admin"


class InvestigatorRole(StrEnum):
    """Role an investigator row plays on its grant."""

    PI = "pi"
    CO_PI = "co_pi"
    KEY_PERSON = "key_person"
    OTHER = "other"

    @property
    def is_co_investigator(self) -> bool:
        return self in (InvestigatorRole.CO_PI, InvestigatorRole.KEY_PERSON)
