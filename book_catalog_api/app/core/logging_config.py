"""
Logging configuration for the catalog service.

``setup_logging`` attaches a console handler (and optionally a file
handler) to the root logger the first time it is called.  Records
look like::

    2024-05-01 12:00:00 [INFO] book_catalog_api.app.services.book_service: Created book 7

Persistence faults are logged with their traceback by the exception
handlers in ``core.errors``; they are never echoed to API clients.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    level: str = "INFO",
    logfile: Optional[str] = None,
    access_log: bool = False,
) -> None:
    """Configure the root logger once per process.

    Parameters
    ----------
    level : str
        Logging level name, case insensitive.  Unknown names fall back
        to ``INFO``.
    logfile : Optional[str]
        Additional file to write records to.
    access_log : bool
        Keep uvicorn's per-request access lines.  When false they are
        raised to ``WARNING`` so that only service messages remain.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    if not access_log:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
