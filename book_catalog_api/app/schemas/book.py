"""
Pydantic schemas for books.

Request bodies only describe the *shape* of the payload: which keys
may appear and which JSON types they may carry.  Every field is
nullable so that a missing title and an empty title reach the
validator in ``services.validation`` the same way and produce the
same message.  Unknown keys are rejected outright.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

YearInput = Optional[Union[StrictInt, StrictStr]]


class BookPayload(BaseModel):
    """Keys accepted in a book request body."""

    model_config = ConfigDict(extra="forbid")

    title: Optional[StrictStr] = Field(None, description="Book title; markup is stripped")
    author: Optional[StrictStr] = Field(None, description="Author name; markup is stripped")
    published_year: YearInput = Field(
        None,
        description="Year of publication between 0 and the current year",
        examples=[1965],
    )


class BookCreate(BookPayload):
    """Body of ``POST /books``; all three fields are required."""


class BookReplace(BookPayload):
    """Body of ``PUT /books/{id}``; all three fields are required."""


class BookPatch(BookPayload):
    """Body of ``PATCH /books/{id}``; any non-empty subset of fields."""


class BookRead(BaseModel):
    """A stored book."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    published_year: int


class BookCreated(BaseModel):
    message: str = "Book created successfully"
    id: int


class Message(BaseModel):
    message: str
