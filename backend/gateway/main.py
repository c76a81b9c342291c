"""
Lunele Gateway - FastAPI Application

Generic CRUD gateway over MongoDB collections, protected by a shared
Basic-auth credential.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from gateway.config import Settings, get_settings
from gateway.core.logging import setup_logging
from gateway.database.connections import (
    close_mongo_client,
    create_mongo_client,
    get_database,
    ping,
)
from gateway.routers import health
from gateway.routers.collections import describe_endpoints, register_collection_routes
from gateway.routers.error_handlers import register_error_handlers
from gateway.services.notifications import LoggingNotifier

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


class DatabaseStartupError(RuntimeError):
    """Raised when the store is unreachable and startup must abort."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
    - Configure logging
    - Create the MongoDB client and verify it with a ping

    Shutdown:
    - Close the MongoDB client
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Starting up %s...", settings.app_name)

    client = create_mongo_client(settings)
    app.state.mongo_client = client
    app.state.db = get_database(client, settings)

    try:
        await ping(client)
        logger.info("MongoDB connected successfully (database: %s)", settings.mongo_db_name)
    except Exception as e:
        if settings.exit_on_db_failure:
            close_mongo_client(client)
            raise DatabaseStartupError(f"MongoDB connection error: {e}") from e
        logger.warning("MongoDB connection error: %s (continuing)", e)

    yield

    logger.info("Shutting down %s...", settings.app_name)
    close_mongo_client(client)
    app.state.mongo_client = None
    app.state.db = None
    logger.info("Database connection closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for the given settings.

    One router per configured collection is mounted under `/api`.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="""
## Document CRUD Gateway

Create, read, update and delete documents in the configured MongoDB
collections. Every collection exposes the same endpoints under
`/api/<collection>`.

### Authentication
All `/api/*` endpoints require HTTP Basic authentication:
```
Authorization: Basic base64(username:password)
```

### Listing
`GET /api/<collection>?page=1&limit=10&sort={"createdAt":-1}&<field>=<value>`
        """,
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.notifier = LoggingNotifier()
    app.state.mongo_client = None
    app.state.db = None

    register_error_handlers(app)
    app.include_router(health.router)
    collection_names = register_collection_routes(app, settings.collections)

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint listing every collection and its endpoints."""
        return {
            "success": True,
            "name": f"{settings.app_name} API",
            "version": VERSION,
            "docs": "/docs",
            "health": "/health",
            "authentication": "Basic",
            "collections": collection_names,
            "endpoints": describe_endpoints(collection_names),
        }

    return app


app = create_app()
