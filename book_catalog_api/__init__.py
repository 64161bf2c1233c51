"""
Book Catalog API: a small REST service over a table of books.

All functionality lives in the ``app`` subpackage.
"""

__all__ = []
