"""SQLAlchemy adapters: the store and the grants database row source."""

from __future__ import annotations

from .mappings import metadata
from .source import SqlQueryRowSource, build_sql_row_source
from .store import SqlAlchemyStore, create_store, make_ref, split_ref

__all__ = [
    "SqlAlchemyStore",
    "SqlQueryRowSource",
    "build_sql_row_source",
    "create_store",
    "make_ref",
    "metadata",
    "split_ref",
]
