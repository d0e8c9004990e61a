"""
db/connection.py
----------------
Manages the database connection pool.
PostgreSQL connections come from psycopg2's ThreadedConnectionPool.
A ``sqlite:///`` URL opens a single shared SQLite connection instead,
used for local development and the test suite.
"""

import sqlite3
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2 import pool

from config import DATABASE_URL, DB_POOL_MAX, DB_POOL_MIN
from db.errors import ConstraintViolation
from utils.logger import get_logger

logger = get_logger(__name__)

SQLITE_PREFIX = "sqlite:///"

_CONSTRAINT_ERRORS = (
    psycopg2.IntegrityError,
    psycopg2.DataError,
    sqlite3.IntegrityError,
)

_pool = None
_dialect: Optional[str] = None


class _SQLiteCursor:
    """sqlite3 cursor speaking the ``%s`` paramstyle, usable in a ``with`` block."""

    def __init__(self, cursor: sqlite3.Cursor):
        self._cursor = cursor

    def __enter__(self) -> "_SQLiteCursor":
        return self

    def __exit__(self, *exc_info) -> None:
        self._cursor.close()

    def execute(self, sql: str, params=()) -> None:
        self._cursor.execute(sql.replace("%s", "?"), tuple(params))

    def fetchone(self):
        return self._cursor.fetchone()

    def fetchall(self) -> list:
        return self._cursor.fetchall()

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount


class _SQLiteConnection:
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def cursor(self) -> _SQLiteCursor:
        return _SQLiteCursor(self._conn.cursor())

    def commit(self) -> None:
        self._conn.commit()

    def rollback(self) -> None:
        self._conn.rollback()

    def close(self) -> None:
        self._conn.close()


class SQLitePool:
    """
    Pool-shaped holder for one SQLite connection.

    Callers get the same connection under a lock, so transactions
    from different threads never interleave.
    """

    def __init__(self, path: str):
        raw = sqlite3.connect(path, check_same_thread=False)
        raw.execute("PRAGMA foreign_keys = ON")
        self._conn = _SQLiteConnection(raw)
        self._lock = threading.RLock()

    def getconn(self) -> _SQLiteConnection:
        self._lock.acquire()
        return self._conn

    def putconn(self, conn: _SQLiteConnection) -> None:
        self._lock.release()

    def closeall(self) -> None:
        self._conn.close()


def init_pool(
    min_conn: int = DB_POOL_MIN,
    max_conn: int = DB_POOL_MAX,
    database_url: Optional[str] = None,
) -> None:
    """
    Initialize the database connection pool.

    Args:
        min_conn: Minimum number of connections to keep open.
        max_conn: Maximum number of connections allowed.
        database_url: Overrides ``config.DATABASE_URL`` when given.

    Raises:
        psycopg2.OperationalError: If the PostgreSQL server is unreachable.
        sqlite3.OperationalError: If the SQLite file cannot be opened.
    """
    global _pool, _dialect
    if _pool is not None:
        return
    url = database_url or DATABASE_URL

    if url.startswith(SQLITE_PREFIX):
        path = url[len(SQLITE_PREFIX):]
        try:
            _pool = SQLitePool(path)
        except sqlite3.OperationalError as e:
            logger.error(f"Failed to open SQLite store at {path}: {e}")
            raise
        _dialect = "sqlite"
        logger.info(f"SQLite store opened at {path}.")
        return

    try:
        _pool = pool.ThreadedConnectionPool(min_conn, max_conn, url)
    except psycopg2.OperationalError as e:
        logger.error(f"Failed to initialize database pool: {e}")
        raise
    _dialect = "postgresql"
    logger.info("Database connection pool initialized successfully.")


def get_dialect() -> str:
    """Return ``"postgresql"`` or ``"sqlite"`` for the active pool."""
    if _dialect is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _dialect


def get_connection():
    """
    Get a connection from the pool.

    Raises:
        RuntimeError: If the pool has not been initialized.
    """
    if _pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")
    return _pool.getconn()


def release_connection(conn) -> None:
    """Return a connection back to the pool."""
    if _pool is not None:
        _pool.putconn(conn)


@contextmanager
def transaction() -> Iterator:
    """
    Run a block of statements as one transaction and yield its cursor.

    Commits when the block finishes, rolls back on any exception.
    Driver integrity and data errors surface as ConstraintViolation.
    """
    conn = get_connection()
    committed = False
    try:
        with conn.cursor() as cur:
            yield cur
        conn.commit()
        committed = True
    except _CONSTRAINT_ERRORS as e:
        raise ConstraintViolation(str(e).strip()) from e
    finally:
        # Also covers KeyboardInterrupt and other BaseExceptions.
        if not committed:
            conn.rollback()
        release_connection(conn)


def close_pool() -> None:
    """Close all connections in the pool."""
    global _pool, _dialect
    if _pool is not None:
        _pool.closeall()
        _pool = None
        _dialect = None
        logger.info("Database connection pool closed.")
