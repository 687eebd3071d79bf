"""
Connection handling for the Portal mammals database.

Opening, inspecting and closing a SQLite file. Everything here is a direct
call into sqlite3; driver errors are logged and re-raised unchanged.
"""
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List

from portal_lesson.config import settings
from utils.logger import setup_logger

logger = setup_logger("Connection", log_file="portal_lesson.log",
                      level=settings.log_level, log_dir=settings.log_dir)


def connect(db_file: str, create: bool = False) -> sqlite3.Connection:
    """
    Open a connection to a SQLite database file.

    sqlite3 creates an empty database for any path it is given, which hides
    typos in the path. Unless create is True a missing file is an error.

    Args:
        db_file: Path to the SQLite database file
        create: Allow creating a new database (and its directory)

    Returns:
        SQLite connection object
    """
    if not create and not os.path.exists(db_file):
        logger.error(f"Database file not found: {db_file}")
        raise FileNotFoundError(f"Database file not found: {db_file}")

    if create:
        db_dir = os.path.dirname(db_file)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    conn = sqlite3.connect(db_file)
    logger.info(f"Connected to database: {db_file}")
    return conn


def list_tables(conn: sqlite3.Connection) -> List[str]:
    """Return the names of the user tables, sorted."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master "
        "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' "
        "ORDER BY name"
    )
    return [row[0] for row in cursor.fetchall()]


def list_fields(conn: sqlite3.Connection, table: str) -> List[str]:
    """
    Return the column names of a table in declaration order.

    Args:
        conn: Open SQLite connection
        table: Table name

    Returns:
        List of column names
    """
    if table not in list_tables(conn):
        raise ValueError(f"No such table: {table}")
    # PRAGMA cannot take a bound parameter; the name was checked above
    cursor = conn.execute(f'PRAGMA table_info("{table}")')
    return [row[1] for row in cursor.fetchall()]


def disconnect(conn: sqlite3.Connection) -> None:
    """Close the connection. Using it afterwards raises sqlite3.ProgrammingError."""
    conn.close()
    logger.info("Disconnected from database")


@contextmanager
def open_database(db_file: str, create: bool = False) -> Iterator[sqlite3.Connection]:
    """Context manager around connect() that always disconnects."""
    conn = connect(db_file, create=create)
    try:
        yield conn
    finally:
        disconnect(conn)
