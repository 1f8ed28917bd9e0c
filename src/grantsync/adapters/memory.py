"""Dictionary-backed store client for tests and dry runs."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from grantsync.domain.ports import ResourceNotFoundError

if TYPE_CHECKING:
    from grantsync.domain.model import StoreEntity, StoreRef


@dataclass(slots=True)
class StoreCall:
    operation: str
    target: str


@dataclass
class InMemoryStore:
    """Store client keeping deep copies, so callers never alias stored records.

    Every operation is appended to ``calls`` which lets tests assert on the
    exact traffic a run produced.
    """

    records: dict[StoreRef, StoreEntity] = field(default_factory=dict["StoreRef", "StoreEntity"])
    calls: list[StoreCall] = field(default_factory=list[StoreCall])
    _next_id: int = 0

    def find_by_attribute[TEntity: StoreEntity](
        self,
        entity_type: type[TEntity],
        attribute: str,
        value: str,
    ) -> StoreRef | None:
        self.calls.append(StoreCall("find", f"{entity_type.__name__}.{attribute}={value}"))
        for ref, record in self.records.items():
            if not isinstance(record, entity_type):
                continue
            stored = getattr(record, attribute)
            if isinstance(stored, list):
                if value in stored:
                    return ref
            elif stored == value:
                return ref
        return None

    def read_resource[TEntity: StoreEntity](
        self,
        ref: StoreRef,
        entity_type: type[TEntity],
    ) -> TEntity:
        self.calls.append(StoreCall("read", ref))
        record = self.records.get(ref)
        if not isinstance(record, entity_type):
            raise ResourceNotFoundError(f"No {entity_type.__name__} stored at {ref}")
        return copy.deepcopy(record)

    def create_resource(self, entity: StoreEntity) -> StoreRef:
        self._next_id += 1
        ref = f"memory://{entity.entity_type.value}/{self._next_id}"
        stored = copy.deepcopy(entity)
        stored.id = ref
        self.records[ref] = stored
        self.calls.append(StoreCall("create", ref))
        return ref

    def update_resource(self, entity: StoreEntity) -> None:
        if entity.id is None or entity.id not in self.records:
            raise ResourceNotFoundError(f"Cannot update unknown record {entity.id}")
        self.records[entity.id] = copy.deepcopy(entity)
        self.calls.append(StoreCall("update", entity.id))

    def writes(self) -> list[StoreCall]:
        return [call for call in self.calls if call.operation in ("create", "update")]

    def of_type[TEntity: StoreEntity](self, entity_type: type[TEntity]) -> list[TEntity]:
        return [record for record in self.records.values() if isinstance(record, entity_type)]


if TYPE_CHECKING:
    from grantsync.domain.ports import StoreClient

    _store_check: StoreClient = InMemoryStore()
