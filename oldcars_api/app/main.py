"""
Main entrypoint for the Old Cars API.

This module assembles the FastAPI application, sets up logging and
includes versioned routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn oldcars_api.app.main:app --reload

The database is opened and migrated in the startup hook.  If it cannot
be opened the hook raises and the server stops before serving any
request.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import ConnectionPool, init_db
from .core.errors import CarStoreError, ErrorKind
from .core.logging_config import setup_logging
from .services.car_service import CarRepository

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings

    app.include_router(v1_router, prefix=settings.api_prefix)

    @app.exception_handler(CarStoreError)
    async def car_store_error_handler(request: Request, exc: CarStoreError) -> PlainTextResponse:
        if exc.kind is not ErrorKind.DECODE:
            logger.error("Unhandled store error on %s %s: %r", request.method, request.url.path, exc)
        return PlainTextResponse(exc.message, status_code=500)

    @app.on_event("startup")
    async def startup_event() -> None:
        pool = ConnectionPool.from_url(settings.database_url, timeout=settings.database_timeout)
        pool.ping()
        version = init_db(pool)
        logger.info("Using database %s (schema version %s)", pool.path, version)
        app.state.car_repository = CarRepository(pool)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
