import os

from portal_lesson.config import (
    DEFAULT_DATA_DIR,
    DEFAULT_DB_PATH,
    DEFAULT_EXPORT_DIR,
    load_settings,
)

PORTAL_VARS = ("PORTAL_DB_PATH", "PORTAL_DATA_DIR", "PORTAL_EXPORT_DIR",
               "PORTAL_LOG_DIR", "PORTAL_LOG_LEVEL")


def test_defaults(monkeypatch):
    for name in PORTAL_VARS:
        monkeypatch.delenv(name, raising=False)

    loaded = load_settings()

    assert loaded.db_path == DEFAULT_DB_PATH == os.path.join("data", "portal_mammals.sqlite")
    assert loaded.data_dir == DEFAULT_DATA_DIR == os.path.join("data", "sample")
    assert loaded.export_dir == DEFAULT_EXPORT_DIR == os.path.join("data", "exports")
    assert loaded.log_dir == "logs"
    assert loaded.log_level == "INFO"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("PORTAL_DB_PATH", str(tmp_path / "other.sqlite"))
    monkeypatch.setenv("PORTAL_EXPORT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("PORTAL_LOG_LEVEL", "DEBUG")

    loaded = load_settings()

    assert loaded.db_path == str(tmp_path / "other.sqlite")
    assert loaded.export_dir == str(tmp_path / "out")
    assert loaded.log_level == "DEBUG"


def test_empty_log_dir_disables_file_logging(monkeypatch):
    monkeypatch.setenv("PORTAL_LOG_DIR", "")
    assert load_settings().log_dir is None
