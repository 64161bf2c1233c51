"""
Top-level API router.

Aggregates the resource routers.  Paths are mounted at the root
(``/books``, ``/authors``) because clients address them directly.
"""

from fastapi import APIRouter

from .endpoints import authors, books

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])
router.include_router(authors.router, prefix="/authors", tags=["authors"])
