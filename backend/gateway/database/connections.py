"""
Database connection management for MongoDB.

The client is created once in the application lifespan and kept on
`app.state`; handlers receive the database through the `get_database`
dependency rather than a module-level global.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from gateway.config import Settings
from gateway.core.logging import mask_mongo_uri

logger = logging.getLogger(__name__)


def create_mongo_client(settings: Settings) -> AsyncIOMotorClient:
    """Create a MongoDB client. No network I/O happens until first use."""
    logger.info("Mongo URI (masked) is: %s", mask_mongo_uri(settings.mongo_uri))
    return AsyncIOMotorClient(
        settings.mongo_uri,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
        tz_aware=True,
    )


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    """Get the configured MongoDB database."""
    return client[settings.mongo_db_name]


async def ping(client: AsyncIOMotorClient) -> None:
    """Round-trip to the server; raises the driver error on failure."""
    await client.admin.command("ping")


def close_mongo_client(client: AsyncIOMotorClient | None) -> None:
    """Close the MongoDB client if one was created."""
    if client is not None:
        client.close()
