"""
This module sets up logging for the reconciler application.
"""
import logging
import sqlite3
from logging import Handler, LogRecord
from typing import Optional

from reservation_parser.config import LOG_LEVEL, RECONCILE_LOG_DB_PATH

from .database import get_db_connection, init_log_table

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SQLiteHandler(Handler):
    """
    A logging handler that writes records to an SQLite database.
    """

    def __init__(self, db_path: str):
        super().__init__()
        self.db_path = db_path

    def emit(self, record: LogRecord) -> None:
        """
        Writes the log record to the database.
        """
        try:
            with get_db_connection(self.db_path) as (conn, cur):
                cur.execute(
                    "INSERT INTO logs (level, message, logger_name) VALUES (?, ?, ?)",
                    (record.levelname, self.format(record), record.name),
                )
        except sqlite3.Error:
            self.handleError(record)


def setup_logging(level: int = LOG_LEVEL, db_path: Optional[str] = RECONCILE_LOG_DB_PATH) -> None:
    """
    Configures the root logger with a console handler and, when a database
    path is given, the SQLiteHandler.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if db_path:
        init_log_table(db_path)
        db_handler = SQLiteHandler(db_path)
        db_handler.setLevel(level)
        db_handler.setFormatter(formatter)
        logger.addHandler(db_handler)
        logging.info(f"Logging configured to use database {db_path} and console.")
