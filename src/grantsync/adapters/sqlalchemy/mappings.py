"""SQLAlchemy table metadata for the grant store."""

from __future__ import annotations

from datetime import UTC, datetime
from logging import getLogger
from typing import Final

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from grantsync.domain.model import AwardStatus, UserRole

log = getLogger(__name__)

ROLE_SEPARATOR: Final = ","


class UTCDateTime(TypeDecorator[datetime]):
    """Naive UTC in the database, aware UTC in Python."""

    impl = DateTime(timezone=False)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None or value.tzinfo is None:
            return value
        return value.astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


class RoleSetType(TypeDecorator[set[UserRole]]):
    """Grow-only role set stored as sorted, comma separated role names.

    Role names the current code does not know are dropped with a warning on
    read, so a store written by a newer release stays readable.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: set[UserRole] | None, dialect: Dialect) -> str:
        _ = dialect
        return ROLE_SEPARATOR.join(sorted(role.value for role in value or ()))

    def process_result_value(self, value: str | None, dialect: Dialect) -> set[UserRole]:
        _ = dialect
        roles: set[UserRole] = set()
        for raw in (value or "").split(ROLE_SEPARATOR):
            name = raw.strip()
            if not name:
                continue
            if name not in UserRole:
                log.warning("Ignoring unknown user role %r read from the store", name)
                continue
            roles.add(UserRole(name))
        return roles


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

funder_table = Table(
    "funders",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("local_key", String, nullable=False, unique=True),
    Column("name", String, nullable=True),
    Column("policy", String, nullable=True),
)

user_table = Table(
    "users",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("first_name", String, nullable=True),
    Column("middle_name", String, nullable=True),
    Column("last_name", String, nullable=True),
    Column("display_name", String, nullable=True),
    Column("email", String, nullable=True),
    Column("roles", RoleSetType, nullable=False),
)

user_locator_id_table = Table(
    "user_locator_ids",
    metadata,
    Column("user_id", String(36), ForeignKey("users.id"), primary_key=True),
    Column("position", Integer, primary_key=True),
    Column("value", String, nullable=False, unique=True),
)

grant_table = Table(
    "grants",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("local_key", String, nullable=False, unique=True),
    Column("award_number", String, nullable=True),
    Column(
        "award_status",
        Enum(
            AwardStatus,
            native_enum=False,
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=True,
    ),
    Column("project_name", String, nullable=True),
    Column("award_date", UTCDateTime, nullable=True),
    Column("start_date", UTCDateTime, nullable=True),
    Column("end_date", UTCDateTime, nullable=True),
    Column("direct_funder_id", String(36), ForeignKey("funders.id"), nullable=True),
    Column("primary_funder_id", String(36), ForeignKey("funders.id"), nullable=True),
    Column("pi_id", String(36), ForeignKey("users.id"), nullable=True),
)

grant_co_pi_table = Table(
    "grant_co_pis",
    metadata,
    Column("grant_id", String(36), ForeignKey("grants.id"), primary_key=True),
    Column("position", Integer, primary_key=True),
    Column("user_id", String(36), ForeignKey("users.id"), nullable=False),
)


__all__ = [
    "RoleSetType",
    "UTCDateTime",
    "funder_table",
    "grant_co_pi_table",
    "grant_table",
    "metadata",
    "user_locator_id_table",
    "user_table",
]
