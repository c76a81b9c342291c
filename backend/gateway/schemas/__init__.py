"""
Request and response schemas for API endpoints.
"""
from gateway.schemas.documents import (
    Pagination,
    DocumentResponse,
    DeletedDocumentResponse,
    DocumentListResponse,
    BulkDeleteRequest,
    BulkDeleteResponse,
    ErrorResponse,
)

__all__ = [
    "Pagination",
    "DocumentResponse",
    "DeletedDocumentResponse",
    "DocumentListResponse",
    "BulkDeleteRequest",
    "BulkDeleteResponse",
    "ErrorResponse",
]
