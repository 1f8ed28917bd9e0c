"""Port for retrieving raw rows from the grants database."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from grantsync.domain.model import SyncMode

type Row = Mapping[str, str | None]


@runtime_checkable
class RowSource(Protocol):
    """Callable port returning every row updated inside ``[start, end]`` for ``mode``."""

    def __call__(
        self,
        *,
        mode: SyncMode,
        start: str,
        end: str | None = None,
    ) -> list[Row]: ...


__all__ = ["Row", "RowSource"]
