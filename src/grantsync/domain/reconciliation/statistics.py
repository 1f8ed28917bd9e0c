"""Per-run counters and the plain-text summary handed to operators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from grantsync.domain.model import SyncMode

NO_RECORDS_MESSAGE = "No records were processed in this update"


@dataclass(slots=True)
class Statistics:
    mode: SyncMode
    funders_created: int = 0
    funders_updated: int = 0
    users_created: int = 0
    users_updated: int = 0
    grants_created: int = 0
    grants_updated: int = 0
    pis_added: int = 0
    co_pis_added: int = 0
    rows_processed: int = 0
    entities_processed: int = 0
    latest_timestamp: str = ""

    def finalize(self, *, rows: int, entities: int, latest_timestamp: str) -> None:
        self.rows_processed = rows
        self.entities_processed = entities
        self.latest_timestamp = latest_timestamp

    def report(self) -> str:
        if self.entities_processed == 0:
            return NO_RECORDS_MESSAGE
        kind = self.mode.value.capitalize()
        lines = [
            f"{kind} update summary",
            f"  rows processed: {self.rows_processed}",
            f"  {self.mode.value}s processed: {self.entities_processed}",
            f"  grants created: {self.grants_created}, updated: {self.grants_updated}",
            f"  funders created: {self.funders_created}, updated: {self.funders_updated}",
            f"  users created: {self.users_created}, updated: {self.users_updated}",
        ]
        if self.pis_added or self.co_pis_added:
            lines.append(f"  PIs assigned: {self.pis_added}, co-PIs assigned: {self.co_pis_added}")
        if self.latest_timestamp:
            lines.append(f"  latest update timestamp: {self.latest_timestamp}")
        return "\n".join(lines)
