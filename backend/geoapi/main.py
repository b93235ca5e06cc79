"""FastAPI application entrypoint, configuration and CLI.

This module provides the main FastAPI application factory that sets up
logging, CORS middleware, includes the lookup and administration routers,
and exposes a health check endpoint for monitoring. It also provides the
``geoapi`` command that loads the data and serves the app with uvicorn.

Example:
    The application can be run with uvicorn:
        $ uvicorn geoapi.main:app --reload

    Or through the console script, choosing the port:
        $ geoapi --port 8080
"""

from __future__ import annotations

import argparse
import logging

import fastapi
import uvicorn
from fastapi.middleware import cors

from geoapi.api import administrations, locate
from geoapi.core import config, logging_setup
from geoapi.services import context

logger = logging.getLogger(__name__)


def create_app() -> fastapi.FastAPI:
    """Create and configure the FastAPI application.

    Sets up logging, CORS middleware and the request-logging middleware,
    includes the API routers and adds a health check endpoint. Data files
    are not read here; the lookup context is loaded on first use (or
    warmed up front by ``run``).

    Returns:
        Configured FastAPI application instance ready for ASGI server.
    """
    settings = config.get_settings()
    logging_setup.configure_logging(settings)
    app = fastapi.FastAPI(title="GeoAPI", version="0.1.0")

    app.include_router(locate.router)
    app.include_router(administrations.router)

    app.middleware("http")(logging_setup.logging_middleware)
    app.add_middleware(
        cors.CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:  # type: ignore[misc]
        """Health check endpoint for monitoring and load balancers.

        Returns:
            Dictionary with status "ok" if the service is running.
        """
        return {"status": "ok"}

    return app


def parse_args(
    argv: list[str] | None, settings: config.Settings
) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="geoapi",
        description="Serve parish lookups by GPS coordinates.",
    )
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    return parser.parse_args(argv)


def run(argv: list[str] | None = None) -> None:
    """Load the data once, then serve the app with uvicorn.

    The lookup context is built before the server starts so no request
    ever waits on, or races with, data loading.

    Args:
        argv: Command-line arguments; defaults to ``sys.argv[1:]``.
    """
    settings = config.get_settings()
    args = parse_args(argv, settings)
    logging_setup.configure_logging(settings)

    ctx = context.get_context()
    logger.info(
        "Loaded %d regions, %d parish records",
        len(ctx.regions),
        len(ctx.catalog.parish_details),
    )
    logger.info(
        "Serving on port %d, check for example: "
        "http://localhost:%d/?lat=40.153687&lon=-8.514602",
        args.port,
        args.port,
    )
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


app = create_app()
