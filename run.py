"""Entry point for the Public Services Booking API.

Serves the FastAPI application with uvicorn.  Intended to be executed
from the project root, e.g. under Docker, where you only specify a
single Python file to run.

Configuration (``HOST``, ``PORT``, ``DATABASE_URL``, ``SECRET_KEY``,
``LOG_LEVEL`` ...) is read from environment variables; see
``public_services_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from public_services_api.app.core.config import settings
from public_services_api.app.main import app


async def run_api() -> None:
    """Start the API using uvicorn on ``settings.host``:``settings.port``."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    try:
        await run_api()
    except Exception:
        logging.exception("API server stopped with an error")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
