"""Tests for the scamclean command-line entry point."""

import csv

import pytest
import sqlalchemy as sa

from scamclean.cli import clean as cli


def _make_db(path, table, number_field, type_field, rows):
    engine = sa.create_engine(f"sqlite:///{path}", future=True)
    with engine.begin() as conn:
        conn.execute(sa.text(f'CREATE TABLE "{table}" ("{number_field}" TEXT, "{type_field}" TEXT)'))
        for number, label in rows:
            conn.execute(
                sa.text(f'INSERT INTO "{table}" VALUES (:number, :label)'),
                {"number": number, "label": label},
            )
    engine.dispose()


def _dirs(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir, tmp_path / "clean-data"


def test_parse_args_defaults_to_databases():
    args = cli.parse_args([])
    assert args.csv is False
    assert args.names == []
    assert args.multiple is None

    args = cli.parse_args(["--db", "--multiple", "sorac", "ntrust"])
    assert args.csv is False
    assert args.multiple == ["sorac", "ntrust"]

    args = cli.parse_args(["--csv", "sola.csv"])
    assert args.csv is True
    assert args.names == ["sola.csv"]


@pytest.mark.parametrize("argv", [["sorac", "--all"], ["--all", "--multiple", "sorac"], ["--csv", "--all", "sola.csv"]])
def test_all_rejects_source_names(argv, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(argv)
    assert excinfo.value.code == 2
    assert "--all cannot be combined" in capsys.readouterr().err


def test_list_databases(capsys):
    assert cli.main(["--db", "--list"]) == 0
    assert "Available databases: sorac, ntrust, cleancall" in capsys.readouterr().out


def test_list_csv_files(capsys):
    assert cli.main(["--csv", "--list"]) == 0
    assert "sola.csv" in capsys.readouterr().out


def test_single_database(tmp_path, capsys):
    data_dir, output_dir = _dirs(tmp_path)
    _make_db(data_dir / "sorac.db", "User", "number", "fullName", [("0987654321", "Giả mạo công an")])

    code = cli.main(["sorac", "--data-dir", str(data_dir), "--output-dir", str(output_dir)])

    assert code == 0
    with (output_dir / "sorac_clean.csv").open(newline="", encoding="utf-8") as handle:
        assert list(csv.DictReader(handle)) == [
            {"number": "84987654321", "type": "Giả mạo công an", "locker_type": "fake_police"}
        ]
    out = capsys.readouterr().out
    assert "fake_police: 1 (100.0%)" in out
    assert "completed successfully" in out


def test_single_source_failure_exits_non_zero(tmp_path, capsys):
    data_dir, output_dir = _dirs(tmp_path)

    assert cli.main(["--db", "sorac", "--data-dir", str(data_dir), "--output-dir", str(output_dir)]) == 1
    assert cli.main(["not-a-db", "--data-dir", str(data_dir)]) == 1
    assert "Cleaning process failed" in capsys.readouterr().out


def test_multiple_without_names_exits_non_zero(capsys):
    assert cli.main(["--db", "--multiple"]) == 1
    assert "Please provide names" in capsys.readouterr().out


def test_multiple_databases_continue_past_failures(tmp_path, capsys):
    data_dir, output_dir = _dirs(tmp_path)
    _make_db(data_dir / "cleancall.db", "identifications", "phone_number", "name", [("+84 91 234 5678", "Spam")])

    code = cli.main(
        ["--db", "--multiple", "sorac", "cleancall", "--data-dir", str(data_dir), "--output-dir", str(output_dir)]
    )

    assert code == 0
    assert (output_dir / "cleancall_clean.csv").exists()
    assert not (output_dir / "sorac_clean.csv").exists()
    assert "1 succeeded, 1 failed" in capsys.readouterr().out


def test_all_csv_files(tmp_path, capsys):
    data_dir, output_dir = _dirs(tmp_path)
    (data_dir / "sola.csv").write_text("id,number,fullName\n1,0912345678,Quảng cáo\n", encoding="utf-8")

    code = cli.main(["--csv", "--all", "--data-dir", str(data_dir), "--output-dir", str(output_dir)])

    assert code == 0
    assert (output_dir / "sola.csv").read_text(encoding="utf-8").splitlines()[1] == "84912345678,Quảng cáo,fake_ads_prize"
    assert "1 succeeded, 4 failed" in capsys.readouterr().out
