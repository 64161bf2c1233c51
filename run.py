"""Entry point for the Book Catalog API.

Starts the FastAPI application under uvicorn.  Host and port are read
from the ``HOST`` and ``PORT`` environment variables (defaults
``0.0.0.0`` and ``3000``); see ``book_catalog_api.app.core.config``
for the remaining settings.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from book_catalog_api.app.core.config import settings
from book_catalog_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        log_config=None,
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
