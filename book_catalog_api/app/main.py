"""
Main entrypoint for the Book Catalog API.

``create_app`` assembles the FastAPI application: it configures
logging, builds the connection pool, installs the error handlers and
includes the resource routers.  The module-level ``app`` lets uvicorn
discover the application directly::

    uvicorn book_catalog_api.app.main:app --reload

Interactive documentation generated from the route declarations is
served at ``/api-docs`` (the raw OpenAPI document at
``/api-docs/openapi.json``).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.router import router
from .core.config import Settings, settings as default_settings
from .core.db import ConnectionPool, init_schema
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging

DOCS_URL = "/api-docs"


def create_app(settings: Optional[Settings] = None, pool: Optional[ConnectionPool] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use instead of the environment-derived default.
    pool : Optional[ConnectionPool]
        Pre-built connection pool.  When omitted, one is created from
        ``settings``.  Either way the application owns the pool and
        closes it on shutdown.

    Returns
    -------
    FastAPI
        A configured application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file, access_log=settings.debug)
    logger = logging.getLogger(__name__)

    if pool is None:
        pool = ConnectionPool(
            settings.database_url,
            size=settings.db_pool_size,
            timeout=settings.db_pool_timeout,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.db_create_schema:
            init_schema(pool)
        logger.info("Serving %s on http://%s:%s", settings.project_name, settings.host, settings.port)
        logger.info("Swagger UI available at http://%s:%s%s", settings.host, settings.port, DOCS_URL)
        try:
            yield
        finally:
            pool.close()

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=DOCS_URL,
        openapi_url=f"{DOCS_URL}/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.pool = pool
    app.state.settings = settings

    register_exception_handlers(app)
    app.include_router(router)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
