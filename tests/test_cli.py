import pytest

import run_ingestion_benchmark
from conftest import FakeDatabase


@pytest.fixture
def fake_postgres(monkeypatch):
    created = []

    def factory(conn_string, table_name):
        db = FakeDatabase(table_name=table_name)
        db.conn_string = conn_string
        created.append(db)
        return db

    monkeypatch.setattr(run_ingestion_benchmark, "PostgresDatabase", factory)
    return created


def test_runs_every_method_and_prints_a_table(tmp_path, fake_postgres, capsys):
    input_file = tmp_path / "readings.csv"
    exit_code = run_ingestion_benchmark.main(
        [
            "--all",
            "-b",
            "100,250",
            "--generate",
            "500",
            "-f",
            str(input_file),
            "--connection-string",
            "postgresql://bench",
        ]
    )

    assert exit_code == 0
    db = fake_postgres[0]
    assert db.conn_string == "postgresql://bench"
    assert db.resets == 12
    out = capsys.readouterr().out
    assert "RESULTS FOR IMPORT OF 500 RECORDS" in out
    assert "Prepared Insert UNNEST" in out


def test_csv_output_is_clean(tmp_path, fake_postgres, capsys, monkeypatch):
    monkeypatch.setenv("CONNECTION_STRING", "postgresql://env")
    input_file = tmp_path / "readings.csv"
    exit_code = run_ingestion_benchmark.main(
        ["copy", "--generate", "50", "-f", str(input_file), "-c", "-t"]
    )

    assert exit_code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[-2] == "Method,Batch Size,Transaction,Duration,Rows/sec,Relative Speed"
    assert lines[-1].startswith("Copy,1000,Yes,")


def test_failed_runs_give_exit_code_1(tmp_path, monkeypatch):
    def factory(conn_string, table_name):
        return FakeDatabase(table_name=table_name, under_report=1)

    monkeypatch.setattr(run_ingestion_benchmark, "PostgresDatabase", factory)
    exit_code = run_ingestion_benchmark.main(
        [
            "binary-copy",
            "--generate",
            "20",
            "-f",
            str(tmp_path / "r.csv"),
            "--connection-string",
            "postgresql://bench",
        ]
    )
    assert exit_code == 1


def test_missing_connection_string_is_a_config_error(tmp_path, monkeypatch, capsys):
    monkeypatch.delenv("CONNECTION_STRING", raising=False)
    exit_code = run_ingestion_benchmark.main(["copy", "-f", str(tmp_path / "r.csv")])
    assert exit_code == 2
    assert "connection string" in capsys.readouterr().err


def test_unknown_method_is_a_config_error(capsys):
    exit_code = run_ingestion_benchmark.main(
        ["fast-insert", "--connection-string", "postgresql://bench"]
    )
    assert exit_code == 2
    assert "Unknown ingestion method" in capsys.readouterr().err
