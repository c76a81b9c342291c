"""
Dependencies for dependency injection in routes.
"""
from gateway.dependencies.auth import (
    require_basic_auth,
    read_json_body,
    AuthenticatedUser,
    JSONBody,
)
from gateway.dependencies.store import get_app_settings, get_database, get_notifier

__all__ = [
    "require_basic_auth",
    "read_json_body",
    "AuthenticatedUser",
    "JSONBody",
    "get_app_settings",
    "get_database",
    "get_notifier",
]
