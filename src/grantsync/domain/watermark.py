"""Latest-update tracking for incremental runs.

Timestamps are kept as the exact strings the source produced. Comparison
always goes through parsed datetimes; lexical order of the strings is never
trusted (``"2020-1-2 00:00:00.0"`` sorts before ``"2020-01-01 00:00:00.0"``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Final

from .errors import SourceFormatError

SOURCE_TIMESTAMP_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d",
)


def parse_source_timestamp(value: str) -> datetime:
    """Parse a source timestamp (``yyyy-mm-dd hh:mm:ss.f``) into an aware UTC datetime."""

    text = value.strip()
    for fmt in SOURCE_TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)  # noqa: DTZ007
        except ValueError:
            continue
        return parsed.replace(tzinfo=UTC)
    raise SourceFormatError(f"Invalid source timestamp: {value!r}")


def parse_optional_timestamp(value: str | None) -> datetime | None:
    if value is None or not value.strip():
        return None
    return parse_source_timestamp(value)


def later_of(current: str, candidate: str) -> str:
    """Return whichever timestamp string is chronologically later.

    Ties keep ``current`` so the retained representation never flips between
    equivalent spellings.
    """

    if parse_source_timestamp(candidate) > parse_source_timestamp(current):
        return candidate
    return current


@dataclass(slots=True)
class WatermarkTracker:
    """Retain the latest update timestamp seen during one run."""

    latest: str = ""

    def fold(self, candidate: str | None) -> str:
        if candidate is None or not candidate.strip():
            return self.latest
        if not self.latest:
            # first value is taken as-is; it still has to be a valid timestamp
            parse_source_timestamp(candidate)
            self.latest = candidate
        else:
            self.latest = later_of(self.latest, candidate)
        return self.latest


__all__ = [
    "SOURCE_TIMESTAMP_FORMATS",
    "WatermarkTracker",
    "later_of",
    "parse_optional_timestamp",
    "parse_source_timestamp",
]
