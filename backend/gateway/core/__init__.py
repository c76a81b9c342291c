"""
Core module - Errors, Basic-auth security and logging utilities.
"""
from gateway.core.errors import (
    GatewayError,
    ValidationError,
    UnauthorizedError,
    NotFoundError,
    StoreError,
)
from gateway.core.security import (
    parse_basic_authorization,
    credentials_match,
    encode_basic_authorization,
)

__all__ = [
    "GatewayError",
    "ValidationError",
    "UnauthorizedError",
    "NotFoundError",
    "StoreError",
    "parse_basic_authorization",
    "credentials_match",
    "encode_basic_authorization",
]
