"""Mutable state of one synchronization run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from grantsync.domain.watermark import WatermarkTracker

from .cache import ResolutionCache
from .statistics import Statistics

if TYPE_CHECKING:
    from grantsync.domain.model import Grant, StoreRef, SyncMode


@dataclass(slots=True)
class RunState:
    """Created at run entry, discarded at run exit; never shared between runs."""

    mode: SyncMode
    cache: ResolutionCache = field(default_factory=ResolutionCache)
    watermark: WatermarkTracker = field(default_factory=WatermarkTracker)
    statistics: Statistics = field(init=False)
    grant_refs: dict[StoreRef, Grant] = field(default_factory=dict["StoreRef", "Grant"])

    def __post_init__(self) -> None:
        self.statistics = Statistics(mode=self.mode)
