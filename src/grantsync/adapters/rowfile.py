"""JSON files holding pulled rows between the ``pull`` and ``load`` actions."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from grantsync.domain.errors import SourceFormatError
from grantsync.domain.model import SyncMode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from grantsync.domain.ports import Row

log = getLogger(__name__)


class RowFilePayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    mode: SyncMode
    start: str | None = None
    end: str | None = None
    rows: list[dict[str, str | None]] = Field(default_factory=list)


def write_row_file(
    path: Path,
    rows: Sequence[Row],
    *,
    mode: SyncMode,
    start: str | None = None,
    end: str | None = None,
) -> Path:
    payload = RowFilePayload(
        mode=mode,
        start=start,
        end=end,
        rows=[dict(row) for row in rows],
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload.model_dump_json(indent=2), encoding="utf-8")
    log.info("Wrote %s %s rows to %s", len(payload.rows), mode.value, path)
    return path


def read_row_file(path: Path) -> RowFilePayload:
    try:
        payload = RowFilePayload.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        raise SourceFormatError(f"Invalid rows file {path}: {exc}") from exc
    log.info("Read %s %s rows from %s", len(payload.rows), payload.mode.value, path)
    return payload


__all__ = ["RowFilePayload", "read_row_file", "write_row_file"]
