"""Readers turning CSV exports and SQLite dumps into raw (number, label) records."""

from __future__ import annotations

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import sqlalchemy as sa
from sqlalchemy import Engine
from sqlalchemy.engine import URL
from sqlalchemy.exc import SQLAlchemyError

from scamclean.ingestion.sources import CsvSource, DatabaseSource

LOGGER = logging.getLogger(__name__)

UNKNOWN_LABEL = "unknown"


class SourceReadError(RuntimeError):
    """Raised when a source cannot be read."""


class SourceNotFoundError(SourceReadError):
    """Raised when a source file does not exist."""


@dataclass(frozen=True)
class RawRecord:
    """A phone number and its free-text label exactly as read from a source."""

    number: str
    label: str


def iter_csv_rows(path: Path, source: CsvSource) -> Iterator[Optional[RawRecord]]:
    """Yield one record per CSV row using the column mapping from ``source``.

    Rows missing the number or the label yield ``None`` so callers can count
    them as skipped.
    """

    if not path.exists():
        raise SourceNotFoundError(f"CSV file not found: {path}")

    with path.open("r", newline="", encoding="utf-8-sig") as handle:
        reader = csv.DictReader(handle)
        missing = {source.number_field, source.type_field} - set(reader.fieldnames or [])
        if missing:
            LOGGER.warning("%s has no column(s) %s; every row will be skipped", path.name, sorted(missing))
        for row in reader:
            number = row.get(source.number_field)
            label = row.get(source.type_field)
            if not number or not label:
                yield None
                continue
            yield RawRecord(number=str(number), label=label)


def build_sqlite_engine(path: Path, *, echo: bool = False) -> Engine:
    """Instantiate a SQLAlchemy engine for a SQLite file."""

    url = URL.create("sqlite", database=path.as_posix())
    return sa.create_engine(url, echo=echo, future=True)


def iter_table_rows(path: Path, source: DatabaseSource, *, engine: Engine | None = None) -> Iterator[RawRecord]:
    """Yield records from the table and columns configured in ``source``.

    Rows without a number are dropped and a missing label becomes
    ``"unknown"``. All rows are fetched before the connection is released.
    """

    owns_engine = engine is None
    if owns_engine:
        if not path.exists():
            raise SourceNotFoundError(f"Database file not found: {path}")
        engine = build_sqlite_engine(path)

    table = sa.table(source.table, sa.column(source.number_field), sa.column(source.type_field))
    query = sa.select(table.c[source.number_field], table.c[source.type_field])

    try:
        with engine.connect() as conn:
            rows = conn.execute(query).all()
    except SQLAlchemyError as exc:
        raise SourceReadError(f"Failed to query {source.table} in {path}: {exc}") from exc
    finally:
        if owns_engine:
            engine.dispose()

    LOGGER.debug("Fetched %d rows from %s.%s", len(rows), path.name, source.table)
    for number, label in rows:
        if not number:
            continue
        yield RawRecord(number=str(number), label=label or UNKNOWN_LABEL)
