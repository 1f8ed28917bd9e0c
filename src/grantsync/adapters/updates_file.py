"""Append-only text file recording the watermark of every successful run.

The last non-blank line is the lower bound for the next incremental query.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from grantsync.domain.watermark import parse_source_timestamp

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UpdatesFile:
    path: Path

    def latest(self) -> str | None:
        if not self.path.is_file():
            return None
        lines = [line.strip() for line in self.path.read_text(encoding="utf-8").splitlines()]
        values = [line for line in lines if line]
        if not values:
            return None
        latest = values[-1]
        parse_source_timestamp(latest)
        return latest

    def append(self, timestamp: str) -> None:
        parse_source_timestamp(timestamp)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(timestamp + "\n")
        log.info("Recorded latest update timestamp %s in %s", timestamp, self.path)


__all__ = ["UpdatesFile"]
