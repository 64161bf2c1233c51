"""
Book endpoints.

Mutating routes validate and sanitize the body first and only then
touch the database, so invalid input never costs a connection.
PATCH, PUT and DELETE do not check that the id exists: writing to a
missing id affects no rows and still reports success.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from book_catalog_api.app.api.params import RowId
from book_catalog_api.app.core.db import ConnectionPool, get_pool
from book_catalog_api.app.core.errors import NotFoundError
from book_catalog_api.app.schemas.book import (
    BookCreate,
    BookCreated,
    BookPatch,
    BookRead,
    BookReplace,
    Message,
)
from book_catalog_api.app.services.book_service import BookService
from book_catalog_api.app.services.validation import validate_full, validate_partial

router = APIRouter()

ERROR_RESPONSE = {"content": {"application/json": {"example": {"error": "Description of the problem"}}}}


@router.get("", response_model=List[BookRead], summary="Retrieve all books")
async def list_books(pool: ConnectionPool = Depends(get_pool)) -> List[BookRead]:
    return await BookService.list_books(pool)


@router.get(
    "/{book_id}",
    response_model=BookRead,
    summary="Retrieve a book by ID",
    responses={404: {"description": "Book not found", **ERROR_RESPONSE}},
)
async def get_book(book_id: RowId, pool: ConnectionPool = Depends(get_pool)) -> BookRead:
    book = await BookService.get_book(pool, book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book


@router.post(
    "",
    response_model=BookCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new book",
    responses={400: {"description": "Missing or invalid field", **ERROR_RESPONSE}},
)
async def create_book(book_in: BookCreate, pool: ConnectionPool = Depends(get_pool)) -> BookCreated:
    """Create a book from ``title``, ``author`` and ``published_year``.

    Text fields are stripped of markup before they are stored.
    """
    fields = validate_full(book_in)
    book_id = await BookService.create_book(pool, fields)
    return BookCreated(message="Book created successfully", id=book_id)


@router.patch(
    "/{book_id}",
    response_model=Message,
    summary="Update a book partially",
    responses={400: {"description": "No valid fields or invalid year", **ERROR_RESPONSE}},
)
async def update_book(book_id: RowId, book_in: BookPatch, pool: ConnectionPool = Depends(get_pool)) -> Message:
    """Update only the supplied fields; empty values are ignored."""
    fields = validate_partial(book_in)
    await BookService.update_book(pool, book_id, fields)
    return Message(message="Book updated successfully")


@router.put(
    "/{book_id}",
    response_model=Message,
    summary="Replace a book",
    responses={400: {"description": "Missing or invalid field", **ERROR_RESPONSE}},
)
async def replace_book(book_id: RowId, book_in: BookReplace, pool: ConnectionPool = Depends(get_pool)) -> Message:
    fields = validate_full(book_in)
    await BookService.replace_book(pool, book_id, fields)
    return Message(message="Book replaced successfully")


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a book",
)
async def delete_book(book_id: RowId, pool: ConnectionPool = Depends(get_pool)) -> Response:
    await BookService.delete_book(pool, book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
