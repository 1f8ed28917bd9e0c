"""Port for the store that receives grants, funders and users."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from grantsync.domain.model import StoreEntity

if TYPE_CHECKING:
    from grantsync.domain.model import StoreRef


class ResourceNotFoundError(LookupError):
    """Raised by ``read_resource`` when no record exists for a reference."""


@runtime_checkable
class StoreClient(Protocol):
    """Blocking request/response contract consumed by the reconciler.

    Indexed attributes are ``local_key`` (funders, grants) and ``locator_ids``
    (users; matches any element of the stored list).
    """

    def find_by_attribute[TEntity: StoreEntity](
        self,
        entity_type: type[TEntity],
        attribute: str,
        value: str,
    ) -> StoreRef | None: ...

    def read_resource[TEntity: StoreEntity](
        self,
        ref: StoreRef,
        entity_type: type[TEntity],
    ) -> TEntity: ...

    def create_resource(self, entity: StoreEntity) -> StoreRef: ...

    def update_resource(self, entity: StoreEntity) -> None: ...


__all__ = ["ResourceNotFoundError", "StoreClient"]
