import sqlite3

import pytest
from fastapi.testclient import TestClient

from book_catalog_api.app.core.config import Settings
from book_catalog_api.app.core.db import ConnectionPool
from book_catalog_api.app.main import create_app


@pytest.fixture
def db_file(tmp_path):
    # Unique database per test (tmp_path is already per-test)
    return str(tmp_path / "catalog.db")


@pytest.fixture
def settings(db_file):
    return Settings(database_url=db_file, db_pool_size=2, db_pool_timeout=0.5)


@pytest.fixture
def pool(settings):
    pool = ConnectionPool(settings.database_url, size=settings.db_pool_size, timeout=settings.db_pool_timeout)
    yield pool
    pool.close()


@pytest.fixture
def client(settings, pool):
    app = create_app(settings=settings, pool=pool)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def add_author(db_file):
    """Insert a row into the ``authors`` table directly (the API has no writer)."""

    def _add(name, biography=None):
        conn = sqlite3.connect(db_file)
        try:
            cursor = conn.execute(
                "INSERT INTO authors (name, biography) VALUES (?, ?)",
                (name, biography),
            )
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    return _add


@pytest.fixture
def create_book(client):
    def _create(title="Dune", author="Frank Herbert", published_year=1965):
        response = client.post(
            "/books",
            json={"title": title, "author": author, "published_year": published_year},
        )
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _create
