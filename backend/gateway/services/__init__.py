"""
Service layer for business logic.
"""
from gateway.services.collection_service import CollectionService
from gateway.services.notifications import LoggingNotifier, Notifier

__all__ = [
    "CollectionService",
    "LoggingNotifier",
    "Notifier",
]
