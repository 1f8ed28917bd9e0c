"""Domain port definitions for adapters."""

from __future__ import annotations

from .source import Row, RowSource
from .store import ResourceNotFoundError, StoreClient

__all__ = [
    "ResourceNotFoundError",
    "Row",
    "RowSource",
    "StoreClient",
]
