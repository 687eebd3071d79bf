"""
Build a new SQLite database from flat CSV files.

Each CSV becomes one table. Column types are inferred by pandas from the
data, so no schema is declared here beyond the columns each table must have.
"""
import csv
import os
import sqlite3
from typing import Dict, List, Mapping

import pandas as pd

from portal_lesson.config import settings
from portal_lesson.connection import connect, disconnect, list_tables
from utils.logger import setup_logger

logger = setup_logger("Builder", log_file="portal_lesson.log",
                      level=settings.log_level, log_dir=settings.log_dir)

TABLE_COLUMNS: Dict[str, List[str]] = {
    "species": ["species_id", "genus", "species", "taxa"],
    "plots": ["plot_id", "plot_type"],
    "surveys": [
        "record_id", "month", "day", "year", "plot_id", "species_id",
        "sex", "hindfoot_length", "weight"
    ],
}


def validate_csv_structure(csv_file: str, required_columns: list) -> bool:
    """
    Validate the header of a CSV file.

    Args:
        csv_file: Path to the CSV file
        required_columns: List of required column names

    Returns:
        True if the CSV structure is valid, False otherwise
    """
    try:
        with open(csv_file, newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            csv_columns = reader.fieldnames
            if not csv_columns:
                logger.error(f"CSV file {csv_file} is empty or has no headers.")
                return False
            missing_columns = [col for col in required_columns if col not in csv_columns]
            if missing_columns:
                logger.error(f"CSV file {csv_file} is missing required columns: {missing_columns}")
                return False
        return True
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Error validating CSV structure of {csv_file}: {e}")
        return False


def load_csv(csv_file: str) -> pd.DataFrame:
    """Read a CSV file into a DataFrame."""
    if not os.path.exists(csv_file):
        logger.error(f"CSV file not found: {csv_file}")
        raise FileNotFoundError(f"CSV file not found: {csv_file}")
    df = pd.read_csv(csv_file)
    logger.info(f"Read {len(df)} rows from {csv_file}")
    return df


def write_table(conn: sqlite3.Connection, name: str, df: pd.DataFrame,
                overwrite: bool = False) -> int:
    """
    Write a DataFrame as a table, letting pandas infer the column types.

    Args:
        conn: Open SQLite connection
        name: Table name
        df: Rows to write
        overwrite: Replace the table if it already exists

    Returns:
        Number of rows written
    """
    if not overwrite and name in list_tables(conn):
        raise ValueError(f"Table '{name}' already exists; pass overwrite=True to replace it")

    df.to_sql(name, conn, if_exists='replace' if overwrite else 'fail', index=False)
    conn.commit()
    logger.info(f"Wrote {len(df)} rows to table '{name}'")
    return len(df)


def table_row_count(conn: sqlite3.Connection, table: str) -> int:
    if table not in list_tables(conn):
        raise ValueError(f"No such table: {table}")
    return conn.execute(f'SELECT COUNT(*) FROM "{table}"').fetchone()[0]


def csv_row_count(csv_file: str) -> int:
    """Count the data rows of a CSV file, not counting the header."""
    with open(csv_file, newline='', encoding='utf-8') as f:
        return sum(1 for _ in csv.DictReader(f))


def _drop_tables(conn: sqlite3.Connection, tables: List[str]) -> None:
    for table in tables:
        conn.execute(f'DROP TABLE IF EXISTS "{table}"')
        logger.warning(f"Dropped partially built table '{table}'")
    conn.commit()


def create_database_from_csv(db_file: str, csv_files: Mapping[str, str],
                             overwrite: bool = False) -> Dict[str, int]:
    """
    Create (or extend) a database with one table per CSV file.

    Either every table is written or none is: on failure the tables created
    by this call are dropped, and a database file created by this call is
    removed.

    Args:
        db_file: Path to the SQLite database file, created if missing
        csv_files: Mapping of table name to CSV path
        overwrite: Replace tables that already exist

    Returns:
        Dictionary with the row count of each written table
    """
    frames = {}
    expected_rows = {}
    for table, csv_file in csv_files.items():
        if not os.path.exists(csv_file):
            logger.error(f"CSV file not found: {csv_file}")
            raise FileNotFoundError(f"CSV file not found: {csv_file}")
        required_columns = TABLE_COLUMNS.get(table, [])
        if not validate_csv_structure(csv_file, required_columns):
            raise ValueError(f"CSV structure validation failed for {csv_file}")
        frames[table] = load_csv(csv_file)
        expected_rows[table] = csv_row_count(csv_file)

    is_new_db = not os.path.exists(db_file)
    conn = connect(db_file, create=True)
    created = []
    try:
        existing = set(list_tables(conn))
        if not overwrite:
            clashes = sorted(table for table in frames if table in existing)
            if clashes:
                raise ValueError(
                    f"Tables already exist: {clashes}; pass overwrite=True to replace them")

        counts = {}
        for table, df in frames.items():
            write_table(conn, table, df, overwrite=overwrite)
            if table not in existing:
                created.append(table)
            stored = table_row_count(conn, table)
            if stored != expected_rows[table]:
                logger.error(f"Table '{table}' has {stored} rows, expected {expected_rows[table]}")
                raise RuntimeError(
                    f"Row count mismatch for table '{table}': {stored} != {expected_rows[table]}")
            counts[table] = stored

    except Exception as e:
        logger.error(f"Error building database {db_file}: {e}")
        _drop_tables(conn, created)
        disconnect(conn)
        if is_new_db:
            os.remove(db_file)
        raise

    disconnect(conn)
    logger.info(f"Database {db_file} built with tables: {counts}")
    return counts
