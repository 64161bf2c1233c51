"""
Application package.

``main`` builds the FastAPI app; ``core`` holds configuration,
logging, errors and the connection pool; ``schemas`` the request and
response models; ``services`` validation and SQL; ``api`` the routes.
"""

from .main import app, create_app  # noqa: F401
