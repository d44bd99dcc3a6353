"""Command-line entry point for cleaning scam phone number sources.

Usage:
    scamclean                               # all databases (default)
    scamclean --all                         # all databases
    scamclean sorac                         # one database
    scamclean --db --multiple sorac ntrust  # several databases
    scamclean --db --list                   # list databases
    scamclean --csv sola.csv                # one CSV export
    scamclean --csv --all                   # every registered CSV export
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from scamclean.ingestion.sources import list_csv_sources, list_database_sources
from scamclean.pipeline import (
    CleaningReport,
    CsvCleaner,
    DatabaseCleaner,
    run_csv_sources,
    run_database_sources,
)
from scamclean.settings import Settings, get_settings

LOGGER = logging.getLogger("scamclean.cli.clean")


def _configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s %(message)s")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="scamclean", description="Clean and classify scam phone number sources")
    kind = p.add_mutually_exclusive_group()
    kind.add_argument("--db", "--database", dest="csv", action="store_false", help="Clean SQLite sources (default)")
    kind.add_argument("--csv", dest="csv", action="store_true", help="Clean CSV exports instead of databases")
    p.add_argument("--all", action="store_true", help="Clean every registered source")
    p.add_argument("--list", action="store_true", help="List registered sources and exit")
    p.add_argument("--multiple", nargs="*", metavar="NAME", help="Clean the given sources, continuing past failures")
    p.add_argument("names", nargs="*", metavar="NAME", help="Source name (database) or file name (CSV)")
    p.add_argument("--data-dir", type=Path, default=None, help="Directory holding the source files")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for cleaned CSV files")
    p.set_defaults(csv=False)
    args = p.parse_args(argv)
    if args.all and (args.names or args.multiple is not None):
        p.error("--all cannot be combined with source names or --multiple")
    return args


def _print_report(report: CleaningReport) -> None:
    stats = report.stats
    print(f"\n📊 Processing summary for {report.source}:")
    print(f"   📱 Total records processed: {stats.total}")
    print(f"   ✅ Valid phone numbers: {stats.valid}")
    print(f"   ❌ Invalid phone numbers: {stats.invalid}")
    print(f"   📊 Total rows skipped: {stats.skipped}")
    print(f"   📁 Output file: {report.output_path}")
    print("\n📈 Type distribution:")
    for category, count, description, percentage in stats.distribution():
        print(f"   {category.value}: {count} ({percentage}%) - {description}")


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    _configure_logging(settings)

    available: List[str] = list_csv_sources() if args.csv else list_database_sources()
    label = "files" if args.csv else "databases"
    options = {"settings": settings, "data_dir": args.data_dir, "output_dir": args.output_dir}

    if args.list:
        print(f"Available {label}: {', '.join(available)}")
        return 0

    if args.multiple is not None or len(args.names) > 1:
        names = list(args.multiple or []) + list(args.names)
        if not names:
            print(f"❌ Please provide names after --multiple. Available {label}: {', '.join(available)}")
            return 1
    elif args.names:
        name = args.names[0]
        cleaner_cls = CsvCleaner if args.csv else DatabaseCleaner
        print(f"Running single source: {name}")
        try:
            report = cleaner_cls(name, **options).run()
        except Exception as exc:
            LOGGER.exception("Cleaning failed for %s", name)
            print(f"❌ Cleaning process failed: {exc}")
            return 1
        _print_report(report)
        print(f"\n✅ Cleaning process for {name} completed successfully")
        return 0
    else:
        names = available

    print(f"🚀 Starting batch processing for {len(names)} {label}: {', '.join(names)}")
    runner = run_csv_sources if args.csv else run_database_sources
    reports = runner(names, **options)
    for report in reports:
        _print_report(report)
    failed = len(names) - len(reports)
    print(f"\n✅ Batch processing completed ({len(reports)} succeeded, {failed} failed)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
