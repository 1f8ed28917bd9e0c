"""Reconciliation core: rows in, store writes and a watermark out.

Flow of one grant-mode run:
1) fast-fail check of the first row against the selected mode
2) fold rows into one Grant per grant key, resolving funders and
   investigators through the run's resolution cache
3) reconcile every Grant against the store (create or merge-update)
4) report statistics and the latest update timestamp
"""

from __future__ import annotations

from .aggregator import GrantAggregator
from .cache import ResolutionCache
from .engine import SyncEngine, SyncResult, check_mode
from .merge import FieldMergePolicy, MergePolicy
from .profiles import (
    DEFAULT_PROFILE,
    HARVARD_PILOT_PROFILE,
    DeploymentProfile,
    get_profile,
)
from .reconciler import Reconciler
from .state import RunState
from .statistics import Statistics

__all__ = [
    "DEFAULT_PROFILE",
    "HARVARD_PILOT_PROFILE",
    "DeploymentProfile",
    "FieldMergePolicy",
    "GrantAggregator",
    "MergePolicy",
    "Reconciler",
    "ResolutionCache",
    "RunState",
    "Statistics",
    "SyncEngine",
    "SyncResult",
    "check_mode",
    "get_profile",
]
