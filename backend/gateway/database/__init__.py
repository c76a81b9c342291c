"""
Database module - MongoDB connection handling.
"""
from gateway.database.connections import (
    create_mongo_client,
    get_database,
    ping,
    close_mongo_client,
)

__all__ = [
    "create_mongo_client",
    "get_database",
    "ping",
    "close_mongo_client",
]
