"""Cleaning pipeline: validate, normalize and classify raw report records.

Every source goes through the same steps::

    read rows -> drop incomplete rows -> drop invalid numbers
              -> format number (84xxxxxxxxx) -> classify label -> write CSV

Output files use the ``number,type,locker_type`` layout where ``type`` is the
original label and ``locker_type`` the :class:`ScamCategory` tag.
"""

from __future__ import annotations

import csv
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from scamclean.classification import ScamCategory, classify, describe
from scamclean.ingestion.readers import RawRecord, iter_csv_rows, iter_table_rows
from scamclean.ingestion.sources import CsvSource, DatabaseSource, get_csv_source, get_database_source
from scamclean.normalization import format_number, is_valid
from scamclean.observability import Observability, get_observability
from scamclean.settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)

OUTPUT_FIELDS = ("number", "type", "locker_type")


@dataclass(frozen=True)
class CleanedRecord:
    """One output row."""

    number: str
    type: str
    locker_type: ScamCategory


@dataclass
class CleaningStats:
    """Counters accumulated while cleaning a single source.

    Attributes:
        total: Rows read from the source.
        valid: Rows with a valid phone number (written to the output).
        invalid: Rows dropped because the number failed validation.
        skipped: Rows dropped for any reason (missing fields or invalid number).
        by_category: Number of valid rows per classified category.
    """

    total: int = 0
    valid: int = 0
    invalid: int = 0
    skipped: int = 0
    by_category: Counter = field(default_factory=Counter)

    def distribution(self) -> List[Tuple[ScamCategory, int, str, float]]:
        """Return ``(category, count, description, percent_of_valid)`` sorted by count."""

        rows = []
        for category, count in self.by_category.most_common():
            percentage = round(count / self.valid * 100, 1) if self.valid else 0.0
            rows.append((category, count, describe(category), percentage))
        return rows


@dataclass(frozen=True)
class CleaningReport:
    """Outcome of cleaning one source."""

    source: str
    output_path: Path
    stats: CleaningStats


def clean_record(record: RawRecord) -> Optional[CleanedRecord]:
    """Return the cleaned row for ``record`` or ``None`` when its number is invalid."""

    if not is_valid(record.number):
        return None
    category = classify(record.label)
    return CleanedRecord(number=format_number(record.number), type=record.label, locker_type=category)


def clean_records(records: Iterable[Optional[RawRecord]]) -> Tuple[List[CleanedRecord], CleaningStats]:
    """Clean ``records`` and collect statistics.

    ``None`` entries stand for source rows missing a number or label and are
    counted as skipped.
    """

    stats = CleaningStats()
    cleaned: List[CleanedRecord] = []
    for record in records:
        stats.total += 1
        if record is None:
            stats.skipped += 1
            continue
        result = clean_record(record)
        if result is None:
            stats.invalid += 1
            stats.skipped += 1
            continue
        stats.valid += 1
        stats.by_category[result.locker_type] += 1
        cleaned.append(result)
    return cleaned, stats


def write_clean_csv(path: Path, records: Iterable[CleanedRecord]) -> Path:
    """Write cleaned rows to ``path`` and return it."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=OUTPUT_FIELDS)
        writer.writeheader()
        for record in records:
            writer.writerow(
                {
                    "number": record.number,
                    "type": record.type,
                    "locker_type": record.locker_type.value,
                }
            )
    return path


class _BaseCleaner:
    """Shared read -> clean -> write flow for a single source."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        data_dir: Path | None = None,
        output_dir: Path | None = None,
        observability: Observability | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.data_dir = Path(data_dir) if data_dir else self.settings.data_dir
        self.output_dir = Path(output_dir) if output_dir else self.settings.output_dir
        self._obs = observability or get_observability(component="pipeline", settings=self.settings)

    @property
    def source_name(self) -> str:  # pragma: no cover - overridden
        raise NotImplementedError

    @property
    def output_path(self) -> Path:  # pragma: no cover - overridden
        raise NotImplementedError

    def read(self) -> Iterable[Optional[RawRecord]]:  # pragma: no cover - overridden
        raise NotImplementedError

    def run(self) -> CleaningReport:
        """Clean the source and write its output file."""

        started = time.perf_counter()
        records, stats = clean_records(self.read())
        output_path = write_clean_csv(self.output_path, records)
        elapsed_ms = (time.perf_counter() - started) * 1000

        tags = {"source": self.source_name}
        self._obs.increment("records.valid", value=stats.valid, tags=tags)
        self._obs.increment("records.invalid", value=stats.invalid, tags=tags)
        self._obs.record_timing("clean.duration", elapsed_ms, tags=tags)
        self._obs.emit_event(
            "source.cleaned",
            source=self.source_name,
            output=output_path,
            total=stats.total,
            valid=stats.valid,
            invalid=stats.invalid,
            skipped=stats.skipped,
            categories={category.value: count for category, count in stats.by_category.items()},
        )
        return CleaningReport(source=self.source_name, output_path=output_path, stats=stats)


class CsvCleaner(_BaseCleaner):
    """Clean a CSV export registered in the source registry."""

    def __init__(self, source: CsvSource | str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.source = get_csv_source(source) if isinstance(source, str) else source

    @property
    def source_name(self) -> str:
        return self.source.file_name

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.source.output_file

    def read(self) -> Iterable[Optional[RawRecord]]:
        return iter_csv_rows(self.data_dir / self.source.file_name, self.source)


class DatabaseCleaner(_BaseCleaner):
    """Clean a SQLite dump registered in the source registry."""

    def __init__(self, source: DatabaseSource | str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.source = get_database_source(source) if isinstance(source, str) else source

    @property
    def source_name(self) -> str:
        return self.source.name

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.source.output_file

    def read(self) -> Iterable[Optional[RawRecord]]:
        return iter_table_rows(self.data_dir / self.source.db_file, self.source)


def _run_many(cleaner_cls: type[_BaseCleaner], names: Sequence[str], **kwargs) -> List[CleaningReport]:
    reports: List[CleaningReport] = []
    for name in names:
        try:
            reports.append(cleaner_cls(name, **kwargs).run())
        except Exception:
            LOGGER.exception("Failed to clean source %s", name)
    return reports


def run_csv_sources(names: Sequence[str], **kwargs) -> List[CleaningReport]:
    """Clean several CSV sources, continuing past failures."""

    return _run_many(CsvCleaner, names, **kwargs)


def run_database_sources(names: Sequence[str], **kwargs) -> List[CleaningReport]:
    """Clean several database sources, continuing past failures."""

    return _run_many(DatabaseCleaner, names, **kwargs)


__all__ = [
    "CleanedRecord",
    "CleaningReport",
    "CleaningStats",
    "CsvCleaner",
    "DatabaseCleaner",
    "clean_record",
    "clean_records",
    "run_csv_sources",
    "run_database_sources",
    "write_clean_csv",
]
