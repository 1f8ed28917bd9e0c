"""Root logger setup for the command line entry point."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATE_FORMAT: Final = "%Y-%m-%d %H:%M:%S"
NOISY_LOGGERS: Final[tuple[str, ...]] = ("sqlalchemy.engine", "sqlalchemy.pool")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Log to stderr with full dates, since runs are usually scheduled.

    ``verbose`` switches grantsync's own loggers to DEBUG (one line per entity);
    SQLAlchemy stays at WARNING either way.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=force,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
