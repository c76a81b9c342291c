"""
API Routers module.
"""
from gateway.routers import collections, error_handlers, health

__all__ = ["collections", "error_handlers", "health"]
