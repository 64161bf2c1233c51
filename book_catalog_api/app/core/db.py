"""
SQLite connection pool and schema bootstrap.

The pool is an explicitly constructed, bounded resource that lives for
the whole process.  ``create_app`` builds one and stores it on
``app.state.pool``; route handlers receive it through the ``get_pool``
dependency instead of importing a global.

Connections are opened lazily up to ``size``.  Once that many are in
use, ``acquire`` waits up to ``timeout`` seconds for one to be checked
back in and then gives up with ``PoolExhaustedError``.  Handlers never
hold a connection for more than one statement: ``run`` acquires,
executes, commits (or rolls back) and releases in one step on a worker
thread, so the event loop is never blocked by database I/O.
"""

import logging
import os
import queue
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, TypeVar

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from .errors import PersistenceError, PoolExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MIN_ROW_ID = -(2**63)
MAX_ROW_ID = 2**63 - 1

SCHEMA = """
CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    author TEXT NOT NULL,
    published_year INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS authors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    biography TEXT
);

CREATE INDEX IF NOT EXISTS idx_books_author ON books(author);
"""


def resolve_database_path(database_url: str) -> str:
    """Return an absolute path for ``database_url``.

    Relative paths are resolved against the project root (the
    directory containing the ``book_catalog_api`` package).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class ConnectionPool:
    """Bounded pool of SQLite connections shared by all requests."""

    def __init__(self, database: str, size: int = 10, timeout: float = 5.0) -> None:
        if size < 1:
            raise ValueError("Pool size must be at least 1")
        self.database = resolve_database_path(database)
        self.size = size
        self.timeout = timeout
        self._idle: "queue.LifoQueue[sqlite3.Connection]" = queue.LifoQueue(maxsize=size)
        self._opened = 0
        self._lock = threading.Lock()
        self._closed = False

    @property
    def idle(self) -> int:
        """Number of open connections currently checked in."""
        return self._idle.qsize()

    @property
    def in_use(self) -> int:
        with self._lock:
            return self._opened - self._idle.qsize()

    def _connect(self) -> sqlite3.Connection:
        # Connections move between worker threads, but only one thread
        # uses a given connection at a time.
        conn = sqlite3.connect(self.database, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _reserve_slot(self) -> bool:
        with self._lock:
            if self._opened < self.size:
                self._opened += 1
                return True
            return False

    def _free_slot(self) -> None:
        with self._lock:
            self._opened -= 1

    def acquire(self) -> sqlite3.Connection:
        """Check out a connection, opening a new one if capacity allows.

        Raises ``PoolExhaustedError`` when every connection stays busy
        for ``timeout`` seconds and ``PersistenceError`` when a new
        connection cannot be opened.
        """
        with self._lock:
            closed = self._closed
        if closed:
            raise PersistenceError("Connection pool is closed")
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass
        if self._reserve_slot():
            try:
                return self._connect()
            except sqlite3.Error as exc:
                self._free_slot()
                raise PersistenceError(f"Could not open database {self.database}: {exc}") from exc
        try:
            return self._idle.get(timeout=self.timeout)
        except queue.Empty:
            raise PoolExhaustedError(
                f"No database connection available within {self.timeout} seconds"
            ) from None

    def release(self, conn: sqlite3.Connection) -> None:
        """Check ``conn`` back into the pool."""
        with self._lock:
            if not self._closed:
                self._idle.put_nowait(conn)
                return
            self._opened -= 1
        conn.close()

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Scoped acquisition: the connection is released on every exit path."""
        conn = self.acquire()
        try:
            yield conn
        finally:
            self.release(conn)

    def _run_sync(self, func: Callable[..., T], *args: Any) -> T:
        with self.connection() as conn:
            try:
                result = func(conn, *args)
                conn.commit()
                return result
            except (sqlite3.Error, OverflowError) as exc:
                # OverflowError: a Python int too large to bind as an SQLite INTEGER.
                conn.rollback()
                raise PersistenceError(f"Query failed: {exc}") from exc
            except Exception:
                conn.rollback()
                raise

    async def run(self, func: Callable[..., T], *args: Any) -> T:
        """Execute ``func(conn, *args)`` on a pooled connection.

        The call runs in the thread pool.  The transaction is committed
        on success and rolled back on failure; driver errors are
        re-raised as ``PersistenceError``.
        """
        return await run_in_threadpool(self._run_sync, func, *args)

    def close(self) -> None:
        """Close idle connections; busy ones are closed when released.

        Closing an already closed pool does nothing.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            idle = []
            while True:
                try:
                    idle.append(self._idle.get_nowait())
                except queue.Empty:
                    break
            self._opened -= len(idle)
        for conn in idle:
            conn.close()
        logger.info("Closed connection pool for %s", self.database)


def init_schema(pool: ConnectionPool) -> None:
    """Create the catalog tables if they do not exist yet."""
    with pool.connection() as conn:
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Could not create schema: {exc}") from exc


def get_pool(request: Request) -> ConnectionPool:
    """FastAPI dependency returning the application's connection pool."""
    return request.app.state.pool
