"""
Pydantic schemas for authors.

Authors are not managed by this service.  The listing is derived from
the ``author`` column of the books table, and single authors are read
from the ``authors`` table and passed through as stored.
"""

from pydantic import BaseModel


class AuthorName(BaseModel):
    """One entry of the distinct author listing."""

    author: str
