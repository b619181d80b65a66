"""Entry point for the Old Cars API.

Serves the FastAPI application with Uvicorn.  Host and port come from
the ``HOST`` and ``PORT`` environment variables (defaults
``127.0.0.1`` and ``8080``); see ``oldcars_api/app/core/config.py`` for
the remaining settings.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from oldcars_api.app.core.config import settings
from oldcars_api.app.main import app


async def main() -> None:
    """Run the API server until it is stopped."""
    logging.getLogger(__name__).info("Running web server on: http://%s:%s", settings.host, settings.port)
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
    if not server.started:
        # The startup hook failed, e.g. the database could not be opened.
        raise SystemExit(3)


if __name__ == "__main__":
    asyncio.run(main())
