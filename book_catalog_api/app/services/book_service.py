"""
Service layer for books.

Each public method issues exactly one parameterized statement on a
pooled connection.  Input is expected to be validated and sanitized
already (see ``services.validation``); column names used in UPDATE
statements come from a fixed whitelist, never from the request.

Updates and deletes report the number of affected rows.  A write that
matches no row is not an error for the API layer.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Dict, List, Optional

from book_catalog_api.app.core.db import ConnectionPool
from book_catalog_api.app.schemas.book import BookRead
from book_catalog_api.app.services.validation import UPDATABLE_FIELDS

BOOK_COLUMNS = "id, title, author, published_year"


class BookService:
    """Service class for reading and writing book rows."""

    @classmethod
    async def list_books(cls, pool: ConnectionPool) -> List[BookRead]:
        """Return every book in the database's native order."""

        def query(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            return conn.execute(f"SELECT {BOOK_COLUMNS} FROM books").fetchall()

        rows = await pool.run(query)
        return [cls._row_to_book_read(row) for row in rows]

    @classmethod
    async def get_book(cls, pool: ConnectionPool, book_id: int) -> Optional[BookRead]:
        """Retrieve a single book, or ``None`` if it does not exist."""

        def query(conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
            return conn.execute(
                f"SELECT {BOOK_COLUMNS} FROM books WHERE id = ?",
                (book_id,),
            ).fetchone()

        row = await pool.run(query)
        if row is None:
            return None
        return cls._row_to_book_read(row)

    @classmethod
    async def create_book(cls, pool: ConnectionPool, fields: Dict[str, Any]) -> int:
        """Insert a book and return the id assigned by the database."""
        logger = logging.getLogger(__name__)

        def insert(conn: sqlite3.Connection) -> int:
            cursor = conn.execute(
                "INSERT INTO books (title, author, published_year) VALUES (?, ?, ?)",
                (fields["title"], fields["author"], fields["published_year"]),
            )
            return int(cursor.lastrowid)

        book_id = await pool.run(insert)
        logger.info("Created book %s", book_id)
        return book_id

    @classmethod
    async def update_book(cls, pool: ConnectionPool, book_id: int, fields: Dict[str, Any]) -> int:
        """Apply a partial update and return the number of rows changed.

        Only keys listed in ``UPDATABLE_FIELDS`` are written; the SET
        clause is assembled from those names in a fixed order.
        """
        logger = logging.getLogger(__name__)
        columns = [name for name in UPDATABLE_FIELDS if name in fields]
        if not columns:
            raise ValueError("update_book requires at least one updatable field")
        assignments = ", ".join(f"{name} = ?" for name in columns)
        params = [fields[name] for name in columns] + [book_id]

        def update(conn: sqlite3.Connection) -> int:
            return conn.execute(f"UPDATE books SET {assignments} WHERE id = ?", params).rowcount

        affected = await pool.run(update)
        cls._log_write(logger, "Updated", book_id, affected, columns)
        return affected

    @classmethod
    async def replace_book(cls, pool: ConnectionPool, book_id: int, fields: Dict[str, Any]) -> int:
        """Overwrite all writable fields of a book."""
        logger = logging.getLogger(__name__)

        def replace(conn: sqlite3.Connection) -> int:
            return conn.execute(
                "UPDATE books SET title = ?, author = ?, published_year = ? WHERE id = ?",
                (fields["title"], fields["author"], fields["published_year"], book_id),
            ).rowcount

        affected = await pool.run(replace)
        cls._log_write(logger, "Replaced", book_id, affected, list(UPDATABLE_FIELDS))
        return affected

    @classmethod
    async def delete_book(cls, pool: ConnectionPool, book_id: int) -> int:
        """Delete a book; deleting a missing id is a no-op."""
        logger = logging.getLogger(__name__)

        def delete(conn: sqlite3.Connection) -> int:
            return conn.execute("DELETE FROM books WHERE id = ?", (book_id,)).rowcount

        affected = await pool.run(delete)
        if affected:
            logger.info("Deleted book %s", book_id)
        else:
            logger.info("Delete of book %s matched no rows", book_id)
        return affected

    @staticmethod
    def _log_write(logger: logging.Logger, verb: str, book_id: int, affected: int, columns: List[str]) -> None:
        if affected:
            logger.info("%s book %s (%s)", verb, book_id, ", ".join(columns))
        else:
            logger.info("%s book %s matched no rows", verb, book_id)

    @staticmethod
    def _row_to_book_read(row: sqlite3.Row) -> BookRead:
        return BookRead(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            published_year=row["published_year"],
        )
