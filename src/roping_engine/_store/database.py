# Area: Store
"""
roping_engine._store.database — Database Initialization
=======================================================

Handles SQLite database initialization, connection management and
transaction scopes shared by every repository.
"""

import sqlite3
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

logger = logging.getLogger("roping_engine.store.database")

# Path to schema file
SCHEMA_PATH = Path(__file__).parent / "schema.sql"

DEFAULT_DB_PATH = "roping.db"

# SQL expression for the timestamps written on update
NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%SZ','now')"


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """
    Get a database connection.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with row factory set and foreign keys enforced
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_database(db_path: str = DEFAULT_DB_PATH) -> None:
    """
    Initialize the database with schema.

    Args:
        db_path: Path to the SQLite database file
    """
    conn = get_connection(db_path)
    try:
        with open(SCHEMA_PATH, "r", encoding="utf-8") as f:
            schema = f.read()
        conn.executescript(schema)
        conn.commit()
        logger.info("Database initialized at %s", db_path)
    finally:
        conn.close()


class BaseRepository:
    """
    Base class for database repositories.

    Provides common database operations and connection management.
    Statements run either on their own short-lived connection or, when
    ``conn`` is given, on the connection of an enclosing transaction.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        """
        Initialize repository.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        """Get a database connection."""
        return get_connection(self.db_path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Open an atomic transaction scope.

        Commits when the block exits normally and rolls back when it
        raises; the exception is re-raised either way.

        Yields:
            Connection to pass to repository methods as ``conn``
        """
        conn = self._get_conn()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def _execute(
        self,
        query: str,
        params: tuple = (),
        fetch: bool = False,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[list]:
        """
        Execute a query.

        Args:
            query: SQL query string
            params: Query parameters
            fetch: If True, fetch and return results
            conn: Connection of an enclosing transaction, if any

        Returns:
            Query results if fetch=True, else None
        """
        if conn is not None:
            cursor = conn.execute(query, params)
            return [dict(row) for row in cursor.fetchall()] if fetch else None

        own = self._get_conn()
        try:
            cursor = own.execute(query, params)
            if fetch:
                return [dict(row) for row in cursor.fetchall()]
            own.commit()
            return None
        finally:
            own.close()

    def _execute_one(
        self,
        query: str,
        params: tuple = (),
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[dict]:
        """Execute query and return single result."""
        results = self._execute(query, params, fetch=True, conn=conn)
        return results[0] if results else None

    def _execute_write(
        self,
        query: str,
        params: tuple = (),
        conn: Optional[sqlite3.Connection] = None,
    ) -> sqlite3.Cursor:
        """
        Execute a write statement and return its cursor.

        The cursor exposes ``lastrowid`` and ``rowcount`` for callers
        that need the inserted id or the number of affected rows.
        """
        if conn is not None:
            return conn.execute(query, params)

        own = self._get_conn()
        try:
            cursor = own.execute(query, params)
            own.commit()
            return cursor
        finally:
            own.close()
