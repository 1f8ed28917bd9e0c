"""Row source executing externally supplied SQL against the grants database."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, text
from sqlalchemy.exc import InterfaceError, OperationalError

from grantsync.config.errors import MissingConfigurationError
from grantsync.domain.errors import SourceUnavailableError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sqlalchemy.engine import Engine

    from grantsync.config import SourceConfig
    from grantsync.domain.model import SyncMode
    from grantsync.domain.ports import Row

log = getLogger(__name__)


def _as_text(value: object) -> str | None:
    if value is None:
        return None
    return str(value)


class SqlQueryRowSource:
    """Run the statement configured for a mode with ``:start``/``:end`` bound.

    Every value is converted to its string form, matching what the
    reconciliation core expects from a row.
    """

    def __init__(self, engine: Engine, queries: Mapping[SyncMode, str]) -> None:
        self.engine = engine
        self.queries = dict(queries)

    def __call__(
        self,
        *,
        mode: SyncMode,
        start: str,
        end: str | None = None,
    ) -> list[Row]:
        query = self.queries.get(mode)
        if query is None:
            raise MissingConfigurationError(f"No source query configured for mode {mode.value}")
        log.info("Querying source for %s records updated between %s and %s", mode, start, end)
        try:
            with self.engine.connect() as connection:
                result = connection.execute(text(query), {"start": start, "end": end})
                rows: list[Row] = [
                    {key: _as_text(value) for key, value in record.items()}
                    for record in result.mappings()
                ]
        except (OperationalError, InterfaceError) as exc:
            raise SourceUnavailableError(f"Source query failed: {exc}") from exc
        log.info("Source returned %s rows", len(rows))
        return rows


def build_sql_row_source(config: SourceConfig, modes: tuple[SyncMode, ...]) -> SqlQueryRowSource:
    queries: dict[SyncMode, str] = {}
    for mode in modes:
        path = config.query_path(mode.value)
        if not path.is_file():
            raise MissingConfigurationError(f"Missing source query file {path}")
        queries[mode] = path.read_text(encoding="utf-8")
    return SqlQueryRowSource(create_engine(config.uri, future=True), queries)


if TYPE_CHECKING:
    from grantsync.domain.ports import RowSource

    _source_check: RowSource = SqlQueryRowSource(create_engine("sqlite://"), {})
