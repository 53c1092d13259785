"""Database store layer - provides SQLite persistence for the application.

Each module covers one area (queries for sources, categories, bills and
incomes; goals; todos; months; insurance; backup). The schema helpers are
re-exported here for easy importing.
"""

from billfold.store.schema import database_exists, get_db_path, init_database

__all__ = [
    "database_exists",
    "get_db_path",
    "init_database",
]
