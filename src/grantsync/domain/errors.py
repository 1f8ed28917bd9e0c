"""Failures raised by the reconciliation core.

Every error here aborts the current run. Writes that reached the store before
the failure stay committed; callers retry the whole run from the last saved
watermark.
"""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for fatal synchronization failures."""


class ConfigMismatchError(SyncError):
    """The selected mode does not match the supplied rows. Raised before any write."""


class StoreInconsistencyError(SyncError):
    """A store lookup returned a reference that could not be read back."""


class StoreUnavailableError(SyncError):
    """The store could not be reached or rejected a request."""


class SourceUnavailableError(SyncError):
    """The grants database could not be queried."""


class SourceFormatError(SyncError):
    """A source value could not be parsed (timestamps, rows files)."""


__all__ = [
    "ConfigMismatchError",
    "SourceFormatError",
    "SourceUnavailableError",
    "StoreInconsistencyError",
    "StoreUnavailableError",
    "SyncError",
]
