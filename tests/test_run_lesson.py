import os

import pandas as pd
import pytest

from portal_lesson.config import settings
from portal_lesson.queries import LESSON_QUERIES
from portal_lesson.run_lesson import export_result, main, run_lesson


def test_run_lesson_builds_missing_database(tmp_path, sample_csvs):
    db_file = str(tmp_path / "lesson.sqlite")
    data_dir = os.path.dirname(sample_csvs["surveys"])

    results = run_lesson(db_file, data_dir=data_dir)

    assert os.path.exists(db_file)
    assert list(results) == list(LESSON_QUERIES)
    assert list(results["distinct_year_species"].columns) == ["year", "species_id"]


def test_run_lesson_missing_database_without_data_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        run_lesson(str(tmp_path / "absent.sqlite"))


def test_run_lesson_exports_parquet(tmp_path, db_file):
    export_dir = tmp_path / "exports"
    run_lesson(db_file, export_dir=str(export_dir))

    exported = sorted(os.listdir(export_dir))
    assert len(exported) == len(LESSON_QUERIES)
    assert all(name.endswith(".parquet") for name in exported)


def test_export_result_skips_empty(tmp_path):
    empty = pd.DataFrame({"year": []})
    assert export_result(empty, "nothing", str(tmp_path / "out")) is None
    assert not (tmp_path / "out").exists()


def test_export_result_round_trips(tmp_path):
    df = pd.DataFrame({"year": [1977, 1978], "n_species": [3, 5]})
    path = export_result(df, "species_count_per_year", str(tmp_path))
    pd.testing.assert_frame_equal(pd.read_parquet(path), df)


def test_main_generates_and_runs(tmp_path, capsys):
    data_dir = str(tmp_path / "sample")
    db_file = str(tmp_path / "cli.sqlite")

    code = main(["--db", db_file, "--data-dir", data_dir, "--generate", "100", "--no-export"])

    assert code == 0
    assert os.path.exists(os.path.join(data_dir, "surveys.csv"))
    assert "distinct_year_species" in capsys.readouterr().out


def test_rebuild_without_data_dir_names_rebuild(db_file):
    with pytest.raises(ValueError, match="Cannot rebuild"):
        run_lesson(db_file, rebuild=True)


def test_main_returns_error_code(tmp_path):
    code = main(["--db", str(tmp_path / "absent.sqlite"),
                 "--data-dir", str(tmp_path / "no_csvs")])
    assert code == 1


def test_main_exports_to_configured_dir(tmp_path, db_file, monkeypatch):
    export_dir = tmp_path / "envexports"
    monkeypatch.setattr(settings, "export_dir", str(export_dir))

    assert main(["--db", db_file]) == 0
    assert len(os.listdir(export_dir)) == len(LESSON_QUERIES)


def test_main_no_export_skips_configured_dir(tmp_path, db_file, monkeypatch):
    export_dir = tmp_path / "envexports"
    monkeypatch.setattr(settings, "export_dir", str(export_dir))

    assert main(["--db", db_file, "--no-export"]) == 0
    assert not export_dir.exists()


def test_main_rebuild_existing_database(tmp_path, db_file, sample_csvs):
    data_dir = os.path.dirname(sample_csvs["surveys"])

    code = main(["--db", db_file, "--data-dir", data_dir, "--rebuild", "--no-export"])

    assert code == 0
    results = run_lesson(db_file)
    assert len(results["survey_columns"]) == len(pd.read_csv(sample_csvs["surveys"]))
