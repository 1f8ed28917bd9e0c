from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from grantsync.app import build_engine, load_rows, pull_rows, sync_from_source
from grantsync.config import MissingConfigurationError, configure_logging
from grantsync.domain.errors import SourceFormatError
from grantsync.domain.model import SyncMode
from grantsync.domain.reconciliation.profiles import PROFILES
from grantsync.domain.watermark import parse_source_timestamp

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Synchronise grant, user and funder records into the grant store"
    )
    parser.add_argument(
        "--mode",
        type=SyncMode,
        choices=list(SyncMode),
        help="Kind of records to process (default: grant, or the mode stored in a rows file)",
    )
    parser.add_argument(
        "--start",
        type=str,
        help="Source timestamp (yyyy-mm-dd hh:mm:ss.f) to query from; "
        "overrides the latest timestamp in the updates file",
    )
    parser.add_argument(
        "--end",
        type=str,
        help="Source timestamp (yyyy-mm-dd hh:mm:ss.f) bounding the query",
    )
    parser.add_argument(
        "--deployment",
        choices=sorted(PROFILES),
        help="Institution profile (defaults to GRANTSYNC_DEPLOYMENT or 'default')",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every entity processed",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", help="Pull from the grants database and load into the store")

    pull = subparsers.add_parser("pull", help="Pull rows from the grants database into a file")
    pull.add_argument("path", type=Path, help="Rows file to write")

    load = subparsers.add_parser("load", help="Load rows from a file into the store")
    load.add_argument("path", type=Path, help="Rows file previously written by 'pull'")

    return parser.parse_args(list(argv))


def _validate_timestamps(args: argparse.Namespace) -> None:
    for value in (args.start, args.end):
        if value is not None:
            parse_source_timestamp(value)
    if args.start and args.end and parse_source_timestamp(args.start) > parse_source_timestamp(
        args.end
    ):
        raise ValueError("Start timestamp must be before end")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args: argparse.Namespace
    try:
        parsed_args = _parse_args(args_list)
        _validate_timestamps(parsed_args)
    except (ValueError, SourceFormatError):
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(verbose=parsed_args.verbose)

    try:
        if parsed_args.command == "pull":
            pull_rows(
                parsed_args.path,
                mode=parsed_args.mode or SyncMode.GRANT,
                start=parsed_args.start,
                end=parsed_args.end,
            )
        elif parsed_args.command == "load":
            load_rows(
                parsed_args.path,
                mode=parsed_args.mode,
                engine=build_engine(deployment=parsed_args.deployment),
            )
        elif parsed_args.command == "sync":
            sync_from_source(
                mode=parsed_args.mode or SyncMode.GRANT,
                start=parsed_args.start,
                end=parsed_args.end,
                engine=build_engine(deployment=parsed_args.deployment),
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except MissingConfigurationError as exc:
        log.exception("Configuration incomplete")
        if exc.settings:
            log.error("Set %s in the environment or a .env file", ", ".join(exc.settings))  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
