"""Author endpoints (read only)."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from book_catalog_api.app.api.params import RowId
from book_catalog_api.app.core.db import ConnectionPool, get_pool
from book_catalog_api.app.core.errors import NotFoundError
from book_catalog_api.app.schemas.author import AuthorName
from book_catalog_api.app.services.author_service import AuthorService

router = APIRouter()


@router.get("", response_model=List[AuthorName], summary="Retrieve all authors")
async def list_authors(pool: ConnectionPool = Depends(get_pool)) -> List[AuthorName]:
    """Return the distinct author names found across all books."""
    return await AuthorService.list_authors(pool)


@router.get(
    "/{author_id}",
    response_model=Dict[str, Any],
    summary="Retrieve an author by ID",
    responses={404: {"description": "Author not found"}},
)
async def get_author(author_id: RowId, pool: ConnectionPool = Depends(get_pool)) -> Dict[str, Any]:
    author = await AuthorService.get_author(pool, author_id)
    if author is None:
        raise NotFoundError("Author not found")
    return author
