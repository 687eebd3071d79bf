"""
Walk through the lesson end to end: build the database from CSV files if
needed, connect, inspect the tables, run every lesson query and disconnect.
"""
import argparse
import datetime
import os
from typing import Dict, List, Optional

import pandas as pd

import data_generator
from portal_lesson.builder import create_database_from_csv
from portal_lesson.config import settings
from portal_lesson.connection import connect, disconnect, list_fields, list_tables
from portal_lesson.queries import LESSON_QUERIES, run_query
from utils.logger import setup_logger

logger = setup_logger("Lesson", log_file="portal_lesson.log",
                      level=settings.log_level, log_dir=settings.log_dir)

LESSON_TABLES = ("species", "plots", "surveys")


def export_result(df: pd.DataFrame, name: str, output_dir: str) -> Optional[str]:
    """
    Write a query result to a timestamped Parquet file.

    Returns:
        Path to the exported file, or None when the result is empty
    """
    if df.empty:
        logger.warning(f"Query '{name}' returned no rows. No data to export.")
        return None
    os.makedirs(output_dir, exist_ok=True)
    ts = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    output_file = os.path.join(output_dir, f"{ts}_{name}.parquet")
    df.to_parquet(output_file, index=False)
    logger.info(f"Exported {len(df)} rows from query '{name}' to {output_file}")
    return output_file


def run_lesson(db_file: str, data_dir: Optional[str] = None,
               export_dir: Optional[str] = None,
               rebuild: bool = False) -> Dict[str, pd.DataFrame]:
    """
    Run every lesson query against the database.

    Args:
        db_file: Path to the SQLite database file
        data_dir: Directory holding species.csv, plots.csv and surveys.csv,
            used when the database has to be built
        export_dir: Optional directory for Parquet copies of the results
        rebuild: Rebuild the database from the CSV files even if it exists

    Returns:
        Query results keyed by query name
    """
    if rebuild or not os.path.exists(db_file):
        if data_dir is None:
            if rebuild:
                raise ValueError(f"Cannot rebuild {db_file}: no data directory was given")
            raise FileNotFoundError(
                f"Database {db_file} does not exist and no data directory was given")
        csv_files = {table: os.path.join(data_dir, f"{table}.csv") for table in LESSON_TABLES}
        logger.info(f"Building database {db_file} from {data_dir}")
        create_database_from_csv(db_file, csv_files, overwrite=rebuild)

    results = {}
    conn = connect(db_file)
    try:
        tables = list_tables(conn)
        logger.info(f"Tables: {tables}")
        for table in tables:
            logger.info(f"Fields of {table}: {list_fields(conn, table)}")

        for name, sql in LESSON_QUERIES.items():
            logger.info(f"Running query '{name}'")
            results[name] = run_query(conn, sql)
    finally:
        disconnect(conn)

    if export_dir:
        for name, df in results.items():
            export_result(df, name, export_dir)

    return results


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point for the lesson walkthrough."""
    parser = argparse.ArgumentParser(description='Run the Portal mammals SQLite lesson')
    parser.add_argument('--db', type=str, default=settings.db_path, help='Path to SQLite database')
    parser.add_argument('--data-dir', type=str, default=settings.data_dir,
                        help='Directory with species.csv, plots.csv and surveys.csv')
    parser.add_argument('--export-dir', type=str, default=settings.export_dir,
                        help='Directory for Parquet exports of query results')
    parser.add_argument('--no-export', action='store_true',
                        help='Skip the Parquet exports')
    parser.add_argument('--rebuild', action='store_true',
                        help='Rebuild the database from the CSV files')
    parser.add_argument('--generate', type=int, metavar='N', default=None,
                        help='Generate N synthetic survey records into the data directory first')

    args = parser.parse_args(argv)

    try:
        if args.generate is not None:
            paths = data_generator.write_sample_data(args.data_dir, args.generate)
            logger.info(f"Generated sample data: {paths}")

        results = run_lesson(args.db, data_dir=args.data_dir,
                             export_dir=None if args.no_export else args.export_dir,
                             rebuild=args.rebuild)
    except Exception as e:
        logger.error(f"Error running lesson: {e}")
        return 1

    print("Lesson queries completed:")
    for name, df in results.items():
        print(f"{name}: {len(df)} rows, columns {list(df.columns)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
