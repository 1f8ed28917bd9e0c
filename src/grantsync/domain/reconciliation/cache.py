"""Run-scoped natural key → store reference maps."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grantsync.domain.model import StoreRef

log = getLogger(__name__)

type Resolve = Callable[[], StoreRef | None]


@dataclass(slots=True)
class ResolutionCache:
    """At most one store round-trip per distinct funder key or employee id per run.

    ``None`` results are cached too: an unnamed funder skipped once stays
    skipped for the rest of the run.
    """

    funders: dict[str | None, StoreRef | None] = field(
        default_factory=dict["str | None", "StoreRef | None"]
    )
    users: dict[str | None, StoreRef | None] = field(
        default_factory=dict["str | None", "StoreRef | None"]
    )

    def resolve_funder(self, local_key: str | None, resolve: Resolve) -> StoreRef | None:
        return _resolve_once(self.funders, local_key, resolve)

    def resolve_user(self, employee_id: str | None, resolve: Resolve) -> StoreRef | None:
        return _resolve_once(self.users, employee_id, resolve)


def _resolve_once(
    mapping: dict[str | None, StoreRef | None],
    key: str | None,
    resolve: Resolve,
) -> StoreRef | None:
    if key in mapping:
        return mapping[key]
    ref = resolve()
    mapping[key] = ref
    log.debug("Cached %s -> %s", key, ref)
    return ref
