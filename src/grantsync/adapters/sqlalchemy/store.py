"""Store client backed by SQLAlchemy Core tables.

Each create or update runs in its own transaction, so records written before
a failed run stay committed.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import create_engine, delete, insert, select, update
from sqlalchemy.exc import InterfaceError, OperationalError

from grantsync.adapters.sqlalchemy.mappings import (
    funder_table,
    grant_co_pi_table,
    grant_table,
    metadata,
    user_locator_id_table,
    user_table,
)
from grantsync.domain.errors import StoreUnavailableError
from grantsync.domain.model import EntityType, Funder, Grant, User
from grantsync.domain.ports import ResourceNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Connection, Select, Table
    from sqlalchemy.engine import Engine

    from grantsync.domain.model import StoreEntity, StoreRef

log = getLogger(__name__)

REF_SEPARATOR: Final = "/"

_TABLE_BY_TYPE: Final[dict[EntityType, Table]] = {
    EntityType.FUNDER: funder_table,
    EntityType.USER: user_table,
    EntityType.GRANT: grant_table,
}


def make_ref(entity_type: EntityType, row_id: str) -> StoreRef:
    return f"{entity_type.value}{REF_SEPARATOR}{row_id}"


def split_ref(ref: StoreRef) -> tuple[EntityType, str]:
    type_name, sep, row_id = ref.partition(REF_SEPARATOR)
    if not sep or not row_id:
        raise ResourceNotFoundError(f"Malformed store reference {ref!r}")
    try:
        return EntityType(type_name), row_id
    except ValueError as exc:
        raise ResourceNotFoundError(f"Malformed store reference {ref!r}") from exc


def _row_id(ref: StoreRef | None, expected: EntityType) -> str | None:
    if ref is None:
        return None
    entity_type, row_id = split_ref(ref)
    if entity_type is not expected:
        raise ValueError(f"Reference {ref} does not point at a {expected.value}")
    return row_id


def _ref_or_none(entity_type: EntityType, row_id: str | None) -> StoreRef | None:
    return None if row_id is None else make_ref(entity_type, row_id)


class SqlAlchemyStore:
    """``StoreClient`` implementation for any SQLAlchemy-supported database."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    @contextmanager
    def _transaction(self) -> Iterator[Connection]:
        try:
            with self.engine.begin() as connection:
                yield connection
        except (OperationalError, InterfaceError) as exc:
            raise StoreUnavailableError(f"Store request failed: {exc}") from exc

    # lookups -----------------------------------------------------------------

    def find_by_attribute[TEntity: StoreEntity](
        self,
        entity_type: type[TEntity],
        attribute: str,
        value: str,
    ) -> StoreRef | None:
        kind = entity_type.ENTITY_TYPE
        stmt = self._lookup_statement(kind, attribute, value)
        with self._transaction() as connection:
            row_id = connection.execute(stmt).scalar_one_or_none()
        return _ref_or_none(kind, row_id)

    def _lookup_statement(self, kind: EntityType, attribute: str, value: str) -> Select[Any]:
        if kind is EntityType.USER and attribute == "locator_ids":
            return (
                select(user_locator_id_table.c.user_id)
                .where(user_locator_id_table.c.value == value)
                .limit(1)
            )
        if kind in (EntityType.FUNDER, EntityType.GRANT) and attribute == "local_key":
            table = _TABLE_BY_TYPE[kind]
            return select(table.c.id).where(table.c.local_key == value).limit(1)
        raise ValueError(f"{attribute!r} is not an indexed attribute of {kind.value}")

    def read_resource[TEntity: StoreEntity](
        self,
        ref: StoreRef,
        entity_type: type[TEntity],
    ) -> TEntity:
        kind, row_id = split_ref(ref)
        if kind is not entity_type.ENTITY_TYPE:
            raise ResourceNotFoundError(f"{ref} is not a {entity_type.ENTITY_TYPE.value}")
        with self._transaction() as connection:
            entity = self._read(connection, kind, row_id)
        if entity is None:
            raise ResourceNotFoundError(f"No {kind.value} stored at {ref}")
        return cast("TEntity", entity)

    def _read(self, connection: Connection, kind: EntityType, row_id: str) -> StoreEntity | None:
        table = _TABLE_BY_TYPE[kind]
        row = connection.execute(select(table).where(table.c.id == row_id)).mappings().first()
        if row is None:
            return None
        ref = make_ref(kind, row_id)
        if kind is EntityType.FUNDER:
            return Funder(
                id=ref,
                local_key=row["local_key"],
                name=row["name"],
                policy=row["policy"],
            )
        if kind is EntityType.USER:
            locator_ids = connection.execute(
                select(user_locator_id_table.c.value)
                .where(user_locator_id_table.c.user_id == row_id)
                .order_by(user_locator_id_table.c.position)
            ).scalars()
            return User(
                id=ref,
                first_name=row["first_name"],
                middle_name=row["middle_name"],
                last_name=row["last_name"],
                display_name=row["display_name"],
                email=row["email"],
                locator_ids=list(locator_ids),
                roles=set(row["roles"]),
            )
        co_pis = connection.execute(
            select(grant_co_pi_table.c.user_id)
            .where(grant_co_pi_table.c.grant_id == row_id)
            .order_by(grant_co_pi_table.c.position)
        ).scalars()
        return Grant(
            id=ref,
            local_key=row["local_key"],
            award_number=row["award_number"],
            award_status=row["award_status"],
            project_name=row["project_name"],
            award_date=row["award_date"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            direct_funder=_ref_or_none(EntityType.FUNDER, row["direct_funder_id"]),
            primary_funder=_ref_or_none(EntityType.FUNDER, row["primary_funder_id"]),
            pi=_ref_or_none(EntityType.USER, row["pi_id"]),
            co_pis=[make_ref(EntityType.USER, user_id) for user_id in co_pis],
        )

    # writes ------------------------------------------------------------------

    def create_resource(self, entity: StoreEntity) -> StoreRef:
        row_id = str(uuid.uuid4())
        with self._transaction() as connection:
            table = _TABLE_BY_TYPE[entity.entity_type]
            connection.execute(insert(table).values(id=row_id, **self._columns(entity)))
            self._write_children(connection, entity, row_id)
        ref = make_ref(entity.entity_type, row_id)
        log.debug("Inserted %s", ref)
        return ref

    def update_resource(self, entity: StoreEntity) -> None:
        if entity.id is None:
            raise ResourceNotFoundError(f"Cannot update a {entity.entity_type.value} without id")
        row_id = _row_id(entity.id, entity.entity_type)
        with self._transaction() as connection:
            table = _TABLE_BY_TYPE[entity.entity_type]
            result = connection.execute(
                update(table).where(table.c.id == row_id).values(**self._columns(entity))
            )
            if result.rowcount == 0:
                raise ResourceNotFoundError(f"No {entity.entity_type.value} stored at {entity.id}")
            self._write_children(connection, entity, row_id)
        log.debug("Updated %s", entity.id)

    def _columns(self, entity: StoreEntity) -> dict[str, Any]:
        if isinstance(entity, Funder):
            return {"local_key": entity.local_key, "name": entity.name, "policy": entity.policy}
        if isinstance(entity, User):
            return {
                "first_name": entity.first_name,
                "middle_name": entity.middle_name,
                "last_name": entity.last_name,
                "display_name": entity.display_name,
                "email": entity.email,
                "roles": set(entity.roles),
            }
        if isinstance(entity, Grant):
            return {
                "local_key": entity.local_key,
                "award_number": entity.award_number,
                "award_status": entity.award_status,
                "project_name": entity.project_name,
                "award_date": entity.award_date,
                "start_date": entity.start_date,
                "end_date": entity.end_date,
                "direct_funder_id": _row_id(entity.direct_funder, EntityType.FUNDER),
                "primary_funder_id": _row_id(entity.primary_funder, EntityType.FUNDER),
                "pi_id": _row_id(entity.pi, EntityType.USER),
            }
        raise TypeError(f"Unsupported entity {type(entity).__name__}")

    def _write_children(self, connection: Connection, entity: StoreEntity, row_id: str) -> None:
        if isinstance(entity, User):
            connection.execute(
                delete(user_locator_id_table).where(user_locator_id_table.c.user_id == row_id)
            )
            if entity.locator_ids:
                connection.execute(
                    insert(user_locator_id_table),
                    [
                        {"user_id": row_id, "position": position, "value": value}
                        for position, value in enumerate(entity.locator_ids)
                    ],
                )
        elif isinstance(entity, Grant):
            connection.execute(
                delete(grant_co_pi_table).where(grant_co_pi_table.c.grant_id == row_id)
            )
            if entity.co_pis:
                connection.execute(
                    insert(grant_co_pi_table),
                    [
                        {
                            "grant_id": row_id,
                            "position": position,
                            "user_id": _row_id(ref, EntityType.USER),
                        }
                        for position, ref in enumerate(entity.co_pis)
                    ],
                )


def create_store(uri: str, *, engine: Engine | None = None) -> SqlAlchemyStore:
    """Build a store for ``uri``, creating missing tables."""

    resolved_engine = engine or create_engine(uri, future=True)
    metadata.create_all(resolved_engine, checkfirst=True)
    return SqlAlchemyStore(resolved_engine)


if TYPE_CHECKING:
    from grantsync.domain.ports import StoreClient

    _store_check: StoreClient = SqlAlchemyStore(create_engine("sqlite://"))
