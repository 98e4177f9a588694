"""
This module provides database utilities for the reconciler's log store.

It includes a context manager for handling SQLite database connections to ensure
they are consistently managed and closed.
"""
import sqlite3
from contextlib import contextmanager


@contextmanager
def get_db_connection(db_path: str):
    """
    A context manager for SQLite database connections.

    Args:
        db_path: The path to the SQLite database file.

    Yields:
        A tuple containing the connection and cursor objects.

    Raises:
        sqlite3.Error: If there is an issue with the database connection.
    """
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        yield conn, conn.cursor()
        conn.commit()
    except sqlite3.Error:
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            conn.close()


def init_log_table(db_path: str) -> None:
    """Creates the logs table if it does not exist yet."""
    with get_db_connection(db_path) as (conn, cursor):
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS logs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp DATETIME DEFAULT CURRENT_TIMESTAMP,
                level TEXT NOT NULL,
                message TEXT NOT NULL,
                logger_name TEXT
            )
            """
        )
