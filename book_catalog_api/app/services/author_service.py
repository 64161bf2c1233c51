"""
Service layer for authors.

The author listing is the distinct set of ``author`` values found in
the books table.  Single authors come from the ``authors`` table and
are returned as stored, whatever columns that table carries.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, List, Optional

from book_catalog_api.app.core.db import ConnectionPool
from book_catalog_api.app.schemas.author import AuthorName


class AuthorService:
    """Read-only access to authors."""

    @classmethod
    async def list_authors(cls, pool: ConnectionPool) -> List[AuthorName]:
        def query(conn: sqlite3.Connection) -> List[sqlite3.Row]:
            return conn.execute("SELECT DISTINCT author FROM books").fetchall()

        rows = await pool.run(query)
        return [AuthorName(author=row["author"]) for row in rows]

    @classmethod
    async def get_author(cls, pool: ConnectionPool, author_id: int) -> Optional[Dict[str, Any]]:
        """Return the ``authors`` row with ``author_id`` as a plain dict."""

        def query(conn: sqlite3.Connection) -> Optional[sqlite3.Row]:
            return conn.execute("SELECT * FROM authors WHERE id = ?", (author_id,)).fetchone()

        row = await pool.run(query)
        return dict(row) if row is not None else None
