"""Shared path parameters."""

from typing import Annotated

from fastapi import Path

from book_catalog_api.app.core.db import MAX_ROW_ID, MIN_ROW_ID

# SQLite integers are signed 64-bit; larger ids cannot be bound to a statement.
RowId = Annotated[int, Path(ge=MIN_ROW_ID, le=MAX_ROW_ID, description="Integer row id")]
