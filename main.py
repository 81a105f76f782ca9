# main.py

"""Entry point for vegprice: collect published prices or serve the API."""

import argparse
import logging
import math
import sys
from pathlib import Path

from vegprice.config.logging_config import setup_logging
from vegprice.config.settings import Settings

logger = logging.getLogger("vegprice.main")


def _positive_minutes(raw: str) -> float:
    """argparse type for --every: a finite interval above zero."""
    try:
        minutes = float(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid interval: {raw!r}"
        ) from exc
    if not math.isfinite(minutes) or minutes <= 0:
        raise argparse.ArgumentTypeError(
            f"interval must be a positive number of minutes: {raw!r}"
        )
    return minutes


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="vegprice",
        description=(
            "Collect published vegetable market prices and serve "
            "them as JSON."
        ),
        epilog=f"Source page: {Settings.SOURCE_PAGE_URL}",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        dest="db_path",
        help=f"SQLite store path (default: {Settings.PRICE_DB_PATH}).",
    )
    parser.add_argument(
        "--every",
        type=_positive_minutes,
        default=None,
        metavar="MINUTES",
        help="Keep collecting at this interval instead of running once.",
    )
    parser.add_argument(
        "--export-csv",
        type=Path,
        default=None,
        dest="export_csv",
        metavar="PATH",
        help="Export the stored history to a CSV file and exit.",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the read-only JSON API.",
    )
    parser.add_argument(
        "--host",
        default=None,
        help=f"API bind host (default: {Settings.API_HOST}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help=f"API bind port (default: {Settings.API_PORT}).",
    )
    return parser


def main() -> None:
    """Route to collection (default), export, or the API server."""
    log_file = setup_logging()
    logger.info("vegprice starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    from vegprice.cli import runner

    if args.serve:
        exit_code = runner.run_server(args.host, args.port, args.db_path)
    elif args.export_csv is not None:
        exit_code = runner.run_export(args.export_csv, args.db_path)
    elif args.every is not None:
        exit_code = runner.run_every(args.every, db_path=args.db_path)
    else:
        exit_code = runner.run_collect(db_path=args.db_path)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
