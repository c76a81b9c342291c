"""
Process-scoped resources exposed to routes through dependency injection.

The lifespan stores the database handle and notifier on `app.state`; tests
replace them with `app.dependency_overrides`.
"""
from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from gateway.config import Settings
from gateway.core.errors import StoreError
from gateway.services.notifications import Notifier


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Database handle opened at startup."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise StoreError()
    return db


def get_notifier(request: Request) -> Notifier:
    """Notifier for newly created documents."""
    return request.app.state.notifier
