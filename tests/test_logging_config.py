"""
Tests for the logging setup.
"""

import logging
import sqlite3

import pytest

from rental_reconciler.logging_config import SQLiteHandler, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_console_only(restore_root_logger):
    setup_logging(level=logging.DEBUG, db_path=None)

    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1
    assert not isinstance(restore_root_logger.handlers[0], SQLiteHandler)


def test_setup_logging_writes_to_database(restore_root_logger, tmp_path):
    db_path = str(tmp_path / "logs.db")

    setup_logging(level=logging.INFO, db_path=db_path)
    logging.getLogger("reservation_parser.test").warning("Dropping 2 return events")

    conn = sqlite3.connect(db_path)
    rows = conn.execute("SELECT level, message, logger_name FROM logs").fetchall()
    conn.close()

    assert any(
        level == "WARNING"
        and "Dropping 2 return events" in message
        and logger_name == "reservation_parser.test"
        for level, message, logger_name in rows
    )
