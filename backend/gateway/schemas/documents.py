"""
Request/response schemas shared by every collection endpoint.
"""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool


class Pagination(BaseModel):
    """Pagination metadata for list responses."""
    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size")
    total: int = Field(..., description="Documents matching the filter")
    pages: int = Field(..., description="Number of pages")


class DocumentResponse(BaseModel):
    """Single document envelope."""
    success: bool = True
    data: dict[str, Any]


class DeletedDocumentResponse(DocumentResponse):
    """Envelope for a deleted document."""
    message: str


class DocumentListResponse(BaseModel):
    """Paginated document list envelope."""
    success: bool = True
    data: list[dict[str, Any]]
    pagination: Pagination


class BulkDeleteRequest(BaseModel):
    """
    Body of `DELETE /api/<collection>`.

    An empty filter deletes the whole collection and is only accepted with
    `confirmDeleteAll: true`.
    """
    model_config = ConfigDict(populate_by_name=True)

    filter: dict[str, Any] = Field(default_factory=dict, description="Field filter")
    confirm_delete_all: StrictBool = Field(
        default=False,
        alias="confirmDeleteAll",
        description="Required to delete with an empty filter",
    )


class BulkDeleteResponse(BaseModel):
    """Bulk delete result envelope."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str
    deleted_count: int = Field(..., alias="deletedCount")


class ErrorResponse(BaseModel):
    """Failure envelope."""
    success: bool = False
    error: str
