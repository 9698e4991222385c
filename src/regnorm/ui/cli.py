from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, TextIO

from dotenv import load_dotenv

from regnorm.adapters.scraped import ResolvedRecordPayload, read_scraped_records
from regnorm.app import normalize_records, parse_legislation
from regnorm.config import configure_logging
from regnorm.domain.parsing import classify_business_type
from regnorm.domain.pipeline import DEFAULT_WORKERS

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from regnorm.domain.pipeline import BatchResult

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Normalize scraped enforcement records")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    normalize = subparsers.add_parser(
        "normalize", help="Normalize and resolve a file of scraped records"
    )
    normalize.add_argument("input", type=Path, help="JSON Lines (or JSON array) scraper output")
    normalize.add_argument(
        "--output",
        type=Path,
        help="Where to write resolved records as JSON Lines (default: stdout)",
    )
    normalize.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help="Number of parallel workers (default: %(default)s)",
    )
    normalize.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI or the local data dir)",
    )

    legislation = subparsers.add_parser(
        "legislation", help="Show how breach texts normalize to legislation references"
    )
    legislation.add_argument("breaches", nargs="+", help="Breach description text")

    classify = subparsers.add_parser("classify", help="Classify offender business types")
    classify.add_argument("names", nargs="+", help="Offender names")

    return parser.parse_args(list(argv))


def _write_results(result: BatchResult, output: TextIO) -> None:
    for record in result.resolved:
        output.write(ResolvedRecordPayload.from_resolved(record).model_dump_json())
        output.write("\n")


def _run_normalize(args: argparse.Namespace) -> int:
    if args.workers < 1:
        raise ValueError("--workers must be at least 1")
    records = list(read_scraped_records(args.input))
    result = normalize_records(
        records,
        workers=args.workers,
        database_uri=args.database_uri,
    )
    if args.output is None:
        _write_results(result, sys.stdout)
    else:
        with args.output.open("w", encoding="utf-8") as handle:
            _write_results(result, handle)
    log.info(
        "Normalization finished: resolved=%s, failed=%s",
        len(result.resolved),
        len(result.failures),
    )
    for failure in result.failures:
        log.warning(
            "Record #%s (%s) failed%s: %s",
            failure.index,
            failure.regulator_id or "no id",
            " (transient)" if failure.transient else "",
            failure.error,
        )
    return 1 if result.failures else 0


def _run_legislation(args: argparse.Namespace) -> int:
    for reference in parse_legislation(args.breaches):
        year = reference.year if reference.year is not None else "-"
        number = reference.number if reference.number is not None else "-"
        section = reference.section_label or "-"
        sys.stdout.write(
            f"{reference.title}\t{year}\t{number}\t{reference.type.value}\t{section}\n"
        )
    return 0


def _run_classify(args: argparse.Namespace) -> int:
    for name in args.names:
        sys.stdout.write(f"{name}\t{classify_business_type(name).value}\n")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "normalize":
            exit_code = _run_normalize(parsed_args)
        elif parsed_args.command == "legislation":
            exit_code = _run_legislation(parsed_args)
        elif parsed_args.command == "classify":
            exit_code = _run_classify(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except ValueError:
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during normalization")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
