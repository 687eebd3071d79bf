"""
SQL queries against the Portal mammals database.

Every query goes through run_query(), which hands the SQL string to pandas
and returns a DataFrame whose columns are the SELECT list.
"""
import sqlite3
from collections import OrderedDict
from typing import Any, Optional, Sequence, Union

import pandas as pd

from portal_lesson.config import settings
from portal_lesson.connection import list_tables
from utils.logger import setup_logger

logger = setup_logger("Queries", log_file="portal_lesson.log",
                      level=settings.log_level, log_dir=settings.log_dir)

Params = Optional[Union[Sequence[Any], dict]]

SURVEY_COLUMNS_SQL = "SELECT year, species_id, plot_id FROM surveys"

DISTINCT_YEAR_SPECIES_SQL = "SELECT DISTINCT year, species_id FROM surveys"

SPECIES_COUNT_PER_YEAR_SQL = """
SELECT year, COUNT(DISTINCT species_id) AS n_species
FROM surveys
GROUP BY year
ORDER BY year
"""

RODENTS_PER_PLOT_YEAR_SQL = """
SELECT a.plot_id, a.year, COUNT(*) AS count
FROM surveys a
JOIN species b
ON a.species_id = b.species_id
WHERE b.taxa = 'Rodent'
GROUP BY a.plot_id, a.year
ORDER BY a.plot_id, a.year
"""

RODENTS_PER_GENUS_YEAR_SQL = """
SELECT a.year, b.genus, COUNT(*) AS count
FROM surveys a
JOIN species b
ON a.species_id = b.species_id
WHERE b.taxa = 'Rodent'
GROUP BY a.year, b.genus
ORDER BY a.year, b.genus
"""

# Rodent genera per plot type: species -> surveys in a subquery, then plots
RODENTS_PER_PLOT_TYPE_GENUS_SQL = """
SELECT d.plot_type, c.genus, COUNT(*) AS count
FROM (
    SELECT a.genus, b.plot_id
    FROM species a
    JOIN surveys b
    ON a.species_id = b.species_id
    WHERE a.taxa = 'Rodent'
) c
JOIN plots d
ON c.plot_id = d.plot_id
GROUP BY d.plot_type, c.genus
ORDER BY d.plot_type, c.genus
"""

LESSON_QUERIES = OrderedDict([
    ("survey_columns", SURVEY_COLUMNS_SQL),
    ("distinct_year_species", DISTINCT_YEAR_SPECIES_SQL),
    ("species_count_per_year", SPECIES_COUNT_PER_YEAR_SQL),
    ("rodents_per_plot_year", RODENTS_PER_PLOT_YEAR_SQL),
    ("rodents_per_genus_year", RODENTS_PER_GENUS_YEAR_SQL),
    ("rodents_per_plot_type_genus", RODENTS_PER_PLOT_TYPE_GENUS_SQL),
])


def run_query(conn: sqlite3.Connection, sql: str, params: Params = None) -> pd.DataFrame:
    """
    Send a SQL string to the database and return the rows as a DataFrame.

    Args:
        conn: Open SQLite connection
        sql: SQL statement
        params: Optional values for ? placeholders

    Returns:
        Query result, one column per item in the SELECT list
    """
    try:
        df = pd.read_sql_query(sql, conn, params=params)
    except Exception as e:
        logger.error(f"Query failed: {e}")
        raise
    logger.info(f"Query returned {len(df)} rows x {len(df.columns)} columns")
    return df


def preview_table(conn: sqlite3.Connection, table: str, limit: int = 10) -> pd.DataFrame:
    """Return the first rows of a table."""
    if table not in list_tables(conn):
        raise ValueError(f"No such table: {table}")
    return run_query(conn, f'SELECT * FROM "{table}" LIMIT ?', (int(limit),))


def survey_columns(conn: sqlite3.Connection) -> pd.DataFrame:
    return run_query(conn, SURVEY_COLUMNS_SQL)


def distinct_year_species(conn: sqlite3.Connection) -> pd.DataFrame:
    """Unique (year, species_id) pairs observed in the surveys."""
    return run_query(conn, DISTINCT_YEAR_SPECIES_SQL)


def species_count_per_year(conn: sqlite3.Connection) -> pd.DataFrame:
    return run_query(conn, SPECIES_COUNT_PER_YEAR_SQL)


def rodents_per_plot_year(conn: sqlite3.Connection) -> pd.DataFrame:
    """Number of rodents caught in each plot in each year."""
    return run_query(conn, RODENTS_PER_PLOT_YEAR_SQL)


def rodents_per_genus_year(conn: sqlite3.Connection) -> pd.DataFrame:
    return run_query(conn, RODENTS_PER_GENUS_YEAR_SQL)


def rodents_per_plot_type_genus(conn: sqlite3.Connection) -> pd.DataFrame:
    """Number of rodents of each genus caught in the different plot types."""
    return run_query(conn, RODENTS_PER_PLOT_TYPE_GENUS_SQL)
