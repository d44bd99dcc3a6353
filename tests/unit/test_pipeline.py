"""Tests for the cleaning pipeline."""

import csv
import dataclasses

import sqlalchemy as sa

from scamclean.classification import ScamCategory
from scamclean.ingestion.readers import RawRecord
from scamclean.pipeline import (
    CleanedRecord,
    CleaningReport,
    CsvCleaner,
    DatabaseCleaner,
    clean_record,
    clean_records,
    run_csv_sources,
    run_database_sources,
    write_clean_csv,
)


class _RecordingObservability:
    def __init__(self):
        self.events = []
        self.counters = []
        self.timings = []

    def emit_event(self, event, **fields):
        self.events.append((event, fields))

    def increment(self, metric, *, value=1.0, tags=None):
        self.counters.append((metric, value, tags))

    def record_timing(self, metric, value_ms, *, tags=None):
        self.timings.append((metric, value_ms, tags))


def _read_csv(path):
    with path.open("r", newline="", encoding="utf-8") as handle:
        return list(csv.DictReader(handle))


def test_clean_record_formats_and_classifies():
    result = clean_record(RawRecord(number="098 765 4321", label="Shopee giao hàng"))

    assert result == CleanedRecord(
        number="84987654321",
        type="Shopee giao hàng",
        locker_type=ScamCategory.ONLINE_DELIVERY,
    )


def test_clean_record_drops_invalid_numbers():
    assert clean_record(RawRecord(number="123", label="Spam")) is None


def test_clean_records_collects_stats():
    records = [
        RawRecord(number="0987654321", label="Giả mạo công an"),
        RawRecord(number="+84912345678", label="Spam"),
        RawRecord(number="84281234567", label="spam"),
        RawRecord(number="1900 1234", label="Tổng đài"),
        None,
    ]

    cleaned, stats = clean_records(records)

    assert [row.number for row in cleaned] == ["84987654321", "84912345678", "84281234567"]
    assert stats.total == 5
    assert stats.valid == 3
    assert stats.invalid == 1
    assert stats.skipped == 2
    assert stats.by_category == {ScamCategory.FAKE_POLICE: 1, ScamCategory.PHONE_SPAM: 2}


def test_distribution_sorted_by_count_with_percentages():
    _, stats = clean_records(
        [
            RawRecord(number="0987654321", label="Spam"),
            RawRecord(number="0987654322", label="Spam"),
            RawRecord(number="0987654323", label="Bảo hiểm"),
        ]
    )

    assert stats.distribution() == [
        (ScamCategory.PHONE_SPAM, 2, "Nháy máy spam", 66.7),
        (ScamCategory.INSURANCE, 1, "Bảo hiểm", 33.3),
    ]


def test_distribution_empty():
    _, stats = clean_records([])
    assert stats.distribution() == []


def test_write_clean_csv(tmp_path):
    path = tmp_path / "nested" / "out.csv"
    write_clean_csv(
        path,
        [CleanedRecord(number="84987654321", type="Lừa đảo", locker_type=ScamCategory.SCAM)],
    )

    assert path.read_text(encoding="utf-8").splitlines()[0] == "number,type,locker_type"
    assert _read_csv(path) == [{"number": "84987654321", "type": "Lừa đảo", "locker_type": "scam"}]


def test_csv_cleaner_run(tmp_path):
    data_dir = tmp_path / "data"
    output_dir = tmp_path / "clean-data"
    data_dir.mkdir()
    (data_dir / "clean_call.csv").write_text(
        "id,name,phone_number,total_report\n"
        "1,Giả mạo ngân hàng,0987 654 321,3\n"
        "2,Spam,12345,1\n"
        "3,,0912345678,2\n",
        encoding="utf-8",
    )
    obs = _RecordingObservability()

    report = CsvCleaner("clean_call.csv", data_dir=data_dir, output_dir=output_dir, observability=obs).run()

    assert report.source == "clean_call.csv"
    assert report.output_path == output_dir / "clean_call.csv"
    assert _read_csv(report.output_path) == [
        {"number": "84987654321", "type": "Giả mạo ngân hàng", "locker_type": "fake_bank_credit_securities"}
    ]
    assert (report.stats.total, report.stats.valid, report.stats.invalid, report.stats.skipped) == (3, 1, 1, 2)

    event, fields = obs.events[0]
    assert event == "source.cleaned"
    assert fields["source"] == "clean_call.csv"
    assert fields["categories"] == {"fake_bank_credit_securities": 1}
    assert ("records.valid", 1, {"source": "clean_call.csv"}) in obs.counters
    assert obs.timings[0][0] == "clean.duration"


def test_cleaning_report_does_not_retain_rows():
    assert [f.name for f in dataclasses.fields(CleaningReport)] == ["source", "output_path", "stats"]


def test_database_cleaner_run(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    engine = sa.create_engine(f"sqlite:///{data_dir / 'ntrust.db'}", future=True)
    with engine.begin() as conn:
        conn.execute(sa.text("CREATE TABLE phone_number (dial_id TEXT, type_tag TEXT, name TEXT)"))
        conn.execute(
            sa.text("INSERT INTO phone_number (dial_id, type_tag, name) VALUES (:dial_id, :type_tag, :name)"),
            [
                {"dial_id": "84912345678", "type_tag": "Bất động sản", "name": "a"},
                {"dial_id": "0241234567", "type_tag": None, "name": "b"},
                {"dial_id": "999", "type_tag": "Spam", "name": "c"},
            ],
        )
    engine.dispose()

    report = DatabaseCleaner(
        "ntrust",
        data_dir=data_dir,
        output_dir=tmp_path / "out",
        observability=_RecordingObservability(),
    ).run()

    assert report.output_path.name == "ntrust_clean.csv"
    assert _read_csv(report.output_path) == [
        {"number": "84912345678", "type": "Bất động sản", "locker_type": "real_estate"},
        {"number": "84241234567", "type": "unknown", "locker_type": "other"},
    ]
    assert report.stats.invalid == 1


def test_batch_runs_continue_past_failures(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "sola.csv").write_text("id,number,fullName\n1,0987654321,Lừa đảo\n", encoding="utf-8")
    options = {"data_dir": data_dir, "output_dir": tmp_path / "out", "observability": _RecordingObservability()}

    csv_reports = run_csv_sources(["sola.csv", "ntrust_part1.csv", "unknown.csv"], **options)
    db_reports = run_database_sources(["sorac", "nope"], **options)

    assert [report.source for report in csv_reports] == ["sola.csv"]
    assert csv_reports[0].stats.by_category == {ScamCategory.SCAM: 1}
    assert db_reports == []
