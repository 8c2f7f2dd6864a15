"""
PostgreSQL connection pool for the journal service.

The pool is owned by the application (created in the FastAPI lifespan and
kept on ``app.state``) and handed to repositories explicitly. Every
repository call borrows a connection for a single auto-committed statement
and gives it back in a ``finally`` block.

Usage:
    pool = DatabasePool(settings.DATABASE_URL, min_size=1, max_size=10)
    pool.open()

    with pool.cursor() as cur:
        cur.execute("SELECT 1")

    pool.close()
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

logger = logging.getLogger("Journal.Database")


SCHEMA_STATEMENTS = [
    """
    DO $$
    BEGIN
        IF NOT EXISTS (SELECT 1 FROM pg_type WHERE typname = 'sentiment_type') THEN
            CREATE TYPE sentiment_type AS ENUM ('POSITIVE', 'NEGATIVE', 'NEUTRAL');
        END IF;
    END$$;
    """,
    """
    CREATE TABLE IF NOT EXISTS journal_entries (
        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
        content TEXT NOT NULL,
        sentiment sentiment_type NOT NULL,
        sentiment_score REAL,
        keywords TEXT[] NOT NULL DEFAULT '{}',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    "CREATE INDEX IF NOT EXISTS idx_journal_entries_created_at ON journal_entries (created_at DESC);",
]


class DatabaseError(Exception):
    """Raised when a statement cannot be executed against the store."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class DatabasePool:
    """
    Thin wrapper around psycopg2's ThreadedConnectionPool.

    Connections run in autocommit mode: each statement is its own
    transaction, so an update of content and derived fields is atomic
    as long as it is issued as one statement.
    """

    def __init__(self, dsn: str, min_size: int = 1, max_size: int = 10):
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._pool: Optional[ThreadedConnectionPool] = None

    @property
    def is_open(self) -> bool:
        return self._pool is not None and not self._pool.closed

    def open(self) -> None:
        if self.is_open:
            logger.warning("Database pool already open")
            return
        try:
            self._pool = ThreadedConnectionPool(self._min_size, self._max_size, dsn=self._dsn)
        except psycopg2.Error as exc:
            logger.error(f"Could not open database pool: {exc}")
            raise DatabaseError("Could not connect to the database", operation="connect") from exc
        logger.info(
            f"Database pool opened (min_size={self._min_size}, max_size={self._max_size})"
        )

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
            logger.info("Database pool closed")

    @contextmanager
    def cursor(self, operation: str = "query") -> Iterator[RealDictCursor]:
        """
        Borrow a connection and yield a dict cursor on it.

        psycopg2 errors are wrapped in DatabaseError tagged with
        ``operation`` so route handlers can report what failed.
        """
        if not self.is_open:
            raise DatabaseError("Database pool is not open", operation=operation)

        try:
            conn = self._pool.getconn()
        except psycopg2.Error as exc:
            logger.error(f"Could not acquire connection for {operation}: {exc}")
            raise DatabaseError("Could not acquire a database connection", operation=operation) from exc

        conn.autocommit = True
        cur = conn.cursor(cursor_factory=RealDictCursor)
        broken = False
        try:
            yield cur
        except psycopg2.Error as exc:
            broken = conn.closed != 0
            logger.error(f"Database {operation} failed: {exc}")
            raise DatabaseError("Failed to execute database query", operation=operation) from exc
        finally:
            cur.close()
            self._pool.putconn(conn, close=broken)

    def setup_schema(self) -> None:
        """Create the sentiment enum, entries table and index if missing."""
        with self.cursor("setup") as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        logger.info('Table "journal_entries" created or already exists')
