"""
Portal Mammals SQLite Lesson Package

Modules:
    config.py     - Settings read from the environment and .env files.
    connection.py - Opens, inspects and closes the SQLite database.
    queries.py    - Runs SQL and holds the lesson's example queries.
    builder.py    - Creates a new database from flat CSV files.
    run_lesson.py - Walks through the whole lesson from the command line.

Version: 1.0.0
"""
__version__ = "1.0.0"
