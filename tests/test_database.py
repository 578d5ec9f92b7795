import logging

from pharmacy_inventory.constants import SCHEMA_VERSION
from pharmacy_inventory.database import get_connection
from pharmacy_inventory.database.versioning import ensure_version, get_current_version
from pharmacy_inventory.utils.loggers import get_logger


def test_connection_is_bootstrapped(conn):
    assert get_current_version(conn) == SCHEMA_VERSION
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    assert conn.execute("SELECT COUNT(*) FROM products").fetchone()[0] == 5


def test_ensure_version_keeps_existing(conn):
    assert ensure_version(conn, "99") == SCHEMA_VERSION


def test_reopen_does_not_reseed(tmp_path):
    path = tmp_path / "again.db"
    get_connection(path).close()
    c = get_connection(path)
    try:
        assert c.execute("SELECT COUNT(*) FROM products").fetchone()[0] == 5
    finally:
        c.close()


def test_get_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    logger = get_logger("pharmacy_inventory.test_file_logger", level=logging.DEBUG, log_file=log_file)
    try:
        logger.debug("hello file")
        for h in logger.handlers:
            h.flush()
        assert "hello file" in log_file.read_text(encoding="utf-8")
        assert get_logger("pharmacy_inventory.test_file_logger") is logger
        assert len(logger.handlers) == 2
    finally:
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
