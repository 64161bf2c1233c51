"""Tests for the connection pool and persistence error handling."""

import logging
import sqlite3

import anyio
import pytest
from fastapi.testclient import TestClient

from book_catalog_api.app.core.config import Settings
from book_catalog_api.app.core.db import ConnectionPool, init_schema
from book_catalog_api.app.core.errors import PersistenceError, PoolExhaustedError
from book_catalog_api.app.main import create_app


class TestConnectionPool:
    def test_connections_are_reused(self, db_file):
        pool = ConnectionPool(db_file, size=2, timeout=0.1)
        with pool.connection() as first:
            pass
        with pool.connection() as second:
            assert second is first
        assert pool.idle == 1
        assert pool.in_use == 0
        pool.close()

    def test_release_on_error(self, db_file):
        pool = ConnectionPool(db_file, size=1, timeout=0.1)
        with pytest.raises(RuntimeError):
            with pool.connection():
                raise RuntimeError("boom")
        assert pool.in_use == 0
        assert pool.idle == 1
        pool.close()

    def test_exhaustion(self, db_file):
        pool = ConnectionPool(db_file, size=1, timeout=0.05)
        conn = pool.acquire()
        with pytest.raises(PoolExhaustedError):
            pool.acquire()
        pool.release(conn)
        assert pool.acquire() is conn
        pool.release(conn)
        pool.close()

    def test_exhaustion_is_a_persistence_error(self):
        assert issubclass(PoolExhaustedError, PersistenceError)

    def test_unopenable_database(self, tmp_path):
        pool = ConnectionPool(str(tmp_path / "missing" / "catalog.db"), size=1)
        with pytest.raises(PersistenceError):
            pool.acquire()
        assert pool.in_use == 0

    def test_invalid_size(self, db_file):
        with pytest.raises(ValueError):
            ConnectionPool(db_file, size=0)

    def test_closed_pool_refuses_acquire(self, db_file):
        pool = ConnectionPool(db_file, size=1)
        pool.close()
        with pytest.raises(PersistenceError):
            pool.acquire()

    def test_init_schema_creates_tables(self, db_file):
        pool = ConnectionPool(db_file, size=1)
        init_schema(pool)
        init_schema(pool)
        with pool.connection() as conn:
            tables = {row["name"] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        assert {"books", "authors"} <= tables
        pool.close()


@pytest.fixture
def client_without_schema(db_file):
    settings = Settings(database_url=db_file, db_pool_size=1, db_pool_timeout=0.1, db_create_schema=False)
    pool = ConnectionPool(db_file, size=1, timeout=0.1)
    app = create_app(settings=settings, pool=pool)
    with TestClient(app) as test_client:
        yield test_client, pool


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("get", "/books", None),
        ("get", "/books/1", None),
        ("get", "/authors", None),
        ("get", "/authors/1", None),
        ("post", "/books", {"title": "Dune", "author": "Frank Herbert", "published_year": 1965}),
        ("patch", "/books/1", {"title": "Dune"}),
        ("put", "/books/1", {"title": "Dune", "author": "Frank Herbert", "published_year": 1965}),
        ("delete", "/books/1", None),
    ],
)
def test_query_failure_returns_generic_500(client_without_schema, method, path, body):
    client, pool = client_without_schema
    kwargs = {"json": body} if body is not None else {}
    response = client.request(method.upper(), path, **kwargs)
    assert response.status_code == 500
    # No schema details leak to the caller.
    assert response.json() == {"error": "Internal server error"}
    assert pool.in_use == 0


def test_validation_runs_before_database(client_without_schema):
    client, pool = client_without_schema
    response = client.post("/books", json={"title": "", "author": "X", "published_year": 2000})
    assert response.status_code == 400
    assert pool.in_use == 0
    assert pool.idle == 0


def test_pool_exhaustion_returns_500(client_without_schema):
    client, pool = client_without_schema
    held = pool.acquire()
    try:
        response = client.get("/books")
    finally:
        pool.release(held)
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_run_rolls_back_failed_statement(pool):
    init_schema(pool)

    def failing(conn):
        conn.execute("INSERT INTO books (title, author, published_year) VALUES ('A', 'B', 1)")
        conn.execute("INSERT INTO nowhere VALUES (1)")

    with pytest.raises(PersistenceError) as excinfo:
        anyio.run(pool.run, failing)
    assert isinstance(excinfo.value.__cause__, sqlite3.OperationalError)
    assert pool.in_use == 0
    with pool.connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM books").fetchone()[0] == 0


def test_run_returns_result(pool):
    init_schema(pool)
    result = anyio.run(pool.run, lambda conn, value: conn.execute("SELECT ?", (value,)).fetchone()[0], 7)
    assert result == 7


def test_run_wraps_integer_overflow(pool):
    init_schema(pool)
    with pytest.raises(PersistenceError) as excinfo:
        anyio.run(pool.run, lambda conn: conn.execute("SELECT * FROM books WHERE id = ?", (10**20,)).fetchall())
    assert isinstance(excinfo.value.__cause__, OverflowError)
    assert pool.in_use == 0


def test_close_is_idempotent(db_file, caplog):
    caplog.set_level(logging.INFO, logger="book_catalog_api.app.core.db")
    pool = ConnectionPool(db_file, size=1)
    with pool.connection():
        pass
    pool.close()
    pool.close()
    assert pool.idle == 0
    assert caplog.messages.count(f"Closed connection pool for {pool.database}") == 1


def test_release_after_close_closes_connection(db_file):
    pool = ConnectionPool(db_file, size=1)
    conn = pool.acquire()
    pool.close()
    pool.release(conn)
    assert pool.in_use == 0
    assert pool.idle == 0
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")
