import os

# Console-only logging during tests; must be set before the package is imported
os.environ["PORTAL_LOG_DIR"] = ""

import pytest

import data_generator
from portal_lesson.builder import create_database_from_csv
from portal_lesson.connection import connect, disconnect


@pytest.fixture
def sample_csvs(tmp_path):
    return data_generator.write_sample_data(str(tmp_path / "sample"), num_records=300, seed=42)


@pytest.fixture
def db_file(tmp_path, sample_csvs):
    path = str(tmp_path / "portal_mammals.sqlite")
    create_database_from_csv(path, sample_csvs)
    return path


@pytest.fixture
def conn(db_file):
    connection = connect(db_file)
    yield connection
    # closing twice is a no-op in sqlite3
    disconnect(connection)
