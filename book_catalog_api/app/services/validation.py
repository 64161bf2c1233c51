"""
Sanitization and validation of book input.

Free text (title, author) is reduced to plain text before storage:
tags and comments are removed, the bodies of ``script``-like elements
are dropped entirely and the remaining text is HTML-escaped so it can
be rendered safely.  A value that is empty after sanitization counts
as absent.

``published_year`` may arrive as an integer or a decimal string and
must lie between 0 and the current calendar year.

Validation never touches the database; callers run it before a
connection is acquired.
"""

import html
from datetime import date
from html.parser import HTMLParser
from typing import Any, Dict, Optional

from book_catalog_api.app.core.errors import ValidationError
from book_catalog_api.app.schemas.book import BookPayload

REQUIRED_FIELDS_MESSAGE = "Title, author, and published year are required"
INVALID_YEAR_MESSAGE = "Invalid published year"
NO_FIELDS_MESSAGE = "No valid fields to update"

# Columns a client may write, in statement order.
UPDATABLE_FIELDS = ("title", "author", "published_year")


class _TextExtractor(HTMLParser):
    """Collect character data outside of non-text elements."""

    DISCARD_CONTENT = frozenset({"script", "style", "textarea", "option", "noscript"})

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._discard_depth = 0

    def handle_starttag(self, tag, attrs):
        if tag in self.DISCARD_CONTENT:
            self._discard_depth += 1

    def handle_startendtag(self, tag, attrs):
        pass

    def handle_endtag(self, tag):
        if tag in self.DISCARD_CONTENT and self._discard_depth:
            self._discard_depth -= 1

    def handle_data(self, data):
        if not self._discard_depth:
            self.parts.append(data)


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """Return ``value`` with all markup removed, or ``None`` if nothing is left.

    Sanitizing an already sanitized string returns it unchanged.
    """
    if value is None:
        return None
    parser = _TextExtractor()
    parser.feed(value)
    parser.close()
    text = "".join(parser.parts).strip()
    if not text:
        return None
    return html.escape(text, quote=False)


def current_year() -> int:
    return date.today().year


def parse_published_year(value: Any) -> Optional[int]:
    """Parse an integer year, returning ``None`` when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def check_year_range(year: int) -> int:
    if year < 0 or year > current_year():
        raise ValidationError(INVALID_YEAR_MESSAGE)
    return year


def validate_full(payload: BookPayload) -> Dict[str, Any]:
    """Validate a create/replace body where every field is required."""
    title = sanitize_text(payload.title)
    author = sanitize_text(payload.author)
    year = parse_published_year(payload.published_year)
    if not title or not author or year is None:
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    return {"title": title, "author": author, "published_year": check_year_range(year)}


def validate_partial(payload: BookPayload) -> Dict[str, Any]:
    """Build the update mapping for a partial update.

    Only supplied, non-empty fields are included.  A supplied year must
    parse and be in range.
    """
    updates: Dict[str, Any] = {}
    title = sanitize_text(payload.title)
    if title:
        updates["title"] = title
    author = sanitize_text(payload.author)
    if author:
        updates["author"] = author
    raw_year = payload.published_year
    if raw_year is not None and not (isinstance(raw_year, str) and not raw_year.strip()):
        year = parse_published_year(raw_year)
        if year is None:
            raise ValidationError(INVALID_YEAR_MESSAGE)
        updates["published_year"] = check_year_range(year)
    if not updates:
        raise ValidationError(NO_FIELDS_MESSAGE)
    return updates
