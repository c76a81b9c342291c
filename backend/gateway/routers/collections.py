"""
Collection routers: the same seven CRUD endpoints for every configured collection.

Endpoints per collection `<name>` (mounted at `/api/<normalized-name>`):
- POST   /            create
- GET    /            list with filters and pagination
- DELETE /            bulk delete
- GET    /{id}        fetch
- PUT    /{id}        update
- PATCH  /{id}        update
- DELETE /{id}        delete
"""
import re
from typing import Annotated, Any, Callable, Iterable

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import ValidationError as PydanticValidationError

from gateway.config import Settings
from gateway.core.errors import ValidationError
from gateway.dependencies.auth import JSONBody, require_basic_auth
from gateway.dependencies.store import get_app_settings, get_database, get_notifier
from gateway.schemas.documents import (
    BulkDeleteRequest,
    BulkDeleteResponse,
    DeletedDocumentResponse,
    DocumentListResponse,
    DocumentResponse,
    ErrorResponse,
)
from gateway.routers.error_handlers import describe_validation_errors
from gateway.services.collection_service import CollectionService
from gateway.services.notifications import Notifier, dispatch_created

API_PREFIX = "/api"

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def normalize_collection_name(name: str) -> str:
    """
    URL path segment for a collection name.

    Lowercases and collapses every run of characters other than letters and
    digits into a single hyphen: `custom_orders` -> `custom-orders`.
    """
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


def collection_path(name: str) -> str:
    return f"{API_PREFIX}/{normalize_collection_name(name)}"


def _service_dependency(collection_name: str) -> Callable[..., CollectionService]:
    """Build the dependency that resolves the service for one collection."""

    def get_collection_service(
        db: Annotated[AsyncIOMotorDatabase, Depends(get_database)],
        settings: Annotated[Settings, Depends(get_app_settings)],
    ) -> CollectionService:
        return CollectionService(
            db[collection_name],
            timeout_seconds=settings.store_timeout_seconds,
            default_limit=settings.default_page_limit,
            max_limit=settings.max_page_limit,
        )

    return get_collection_service


async def read_bulk_delete_request(body: JSONBody) -> BulkDeleteRequest:
    """Validate the optional bulk delete body; an absent body means no filter."""
    if body is None:
        return BulkDeleteRequest()
    try:
        return BulkDeleteRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(describe_validation_errors(e.errors()))


def _request_body(schema: dict[str, Any], required: bool = True) -> dict[str, Any]:
    """OpenAPI request body for routes that read JSON through a dependency."""
    return {
        "requestBody": {
            "required": required,
            "content": {"application/json": {"schema": schema}},
        }
    }


DOCUMENT_BODY = _request_body({"type": "object", "additionalProperties": True})
BULK_DELETE_BODY = _request_body(
    BulkDeleteRequest.model_json_schema(by_alias=True), required=False
)


def build_collection_router(collection_name: str) -> APIRouter:
    """Create the authenticated router for a single collection."""
    slug = normalize_collection_name(collection_name)
    if not slug:
        raise ValueError(f"Collection name {collection_name!r} has no usable characters")

    router = APIRouter(
        prefix=f"{API_PREFIX}/{slug}",
        tags=[collection_name],
        dependencies=[Depends(require_basic_auth)],
        responses=ERROR_RESPONSES,
    )
    Service = Annotated[CollectionService, Depends(_service_dependency(collection_name))]

    @router.post(
        "",
        response_model=DocumentResponse,
        status_code=status.HTTP_201_CREATED,
        summary=f"Create {collection_name} document",
        name=f"{slug}:create",
        openapi_extra=DOCUMENT_BODY,
    )
    async def create_document(
        body: JSONBody,
        service: Service,
        background_tasks: BackgroundTasks,
        settings: Annotated[Settings, Depends(get_app_settings)],
        notifier: Annotated[Notifier, Depends(get_notifier)],
    ):
        """
        Create a document.

        `_id`, `createdAt` and `updatedAt` are assigned by the server; values
        sent in the body are ignored.
        """
        document = await service.create(body)
        if collection_name in settings.notify_collections:
            background_tasks.add_task(dispatch_created, notifier, collection_name, document)
        return {"success": True, "data": document}

    @router.get(
        "",
        response_model=DocumentListResponse,
        summary=f"List {collection_name} documents",
        name=f"{slug}:list",
    )
    async def list_documents(request: Request, service: Service):
        """
        List documents with filtering, sorting and pagination.

        - **page**: Page number (default: 1)
        - **limit**: Page size (default: 10)
        - **sort**: `{"field": 1|-1}` JSON or `-field,other` (default: newest first)
        - any other parameter filters on that field: identifiers match
          exactly, other values are case-insensitive substring matches
        """
        documents, pagination = await service.list_documents(dict(request.query_params))
        return {"success": True, "data": documents, "pagination": pagination}

    @router.delete(
        "",
        response_model=BulkDeleteResponse,
        summary=f"Delete many {collection_name} documents",
        name=f"{slug}:delete_many",
        openapi_extra=BULK_DELETE_BODY,
    )
    async def delete_documents(
        service: Service,
        body: Annotated[BulkDeleteRequest, Depends(read_bulk_delete_request)],
    ):
        """
        Delete every document matching `filter`.

        **Warning**: an empty filter requires `confirmDeleteAll: true` and
        empties the collection.
        """
        deleted = await service.delete_many(body.filter, confirm=body.confirm_delete_all)
        return BulkDeleteResponse(
            message=f"Deleted {deleted} document(s)", deleted_count=deleted
        )

    @router.get(
        "/{document_id}",
        response_model=DocumentResponse,
        summary=f"Get {collection_name} document",
        name=f"{slug}:get",
    )
    async def get_document(document_id: str, service: Service):
        """Get a document by id."""
        return {"success": True, "data": await service.get(document_id)}

    @router.put(
        "/{document_id}",
        response_model=DocumentResponse,
        summary=f"Update {collection_name} document",
        name=f"{slug}:replace",
        openapi_extra=DOCUMENT_BODY,
    )
    async def replace_document(
        document_id: str,
        body: JSONBody,
        service: Service,
    ):
        """
        Update a document.

        Merges the body into the stored document like PATCH does; fields not
        in the body are kept.
        """
        return {"success": True, "data": await service.replace(document_id, body)}

    @router.patch(
        "/{document_id}",
        response_model=DocumentResponse,
        summary=f"Partially update {collection_name} document",
        name=f"{slug}:update",
        openapi_extra=DOCUMENT_BODY,
    )
    async def update_document(
        document_id: str,
        body: JSONBody,
        service: Service,
    ):
        """Merge the body into the stored document."""
        return {"success": True, "data": await service.update(document_id, body)}

    @router.delete(
        "/{document_id}",
        response_model=DeletedDocumentResponse,
        summary=f"Delete {collection_name} document",
        name=f"{slug}:delete",
    )
    async def delete_document(document_id: str, service: Service):
        """
        Delete a document and return it.

        **Warning**: This action cannot be undone.
        """
        document = await service.delete(document_id)
        return {"success": True, "message": "Document deleted", "data": document}

    return router


def register_collection_routes(app: FastAPI, collection_names: Iterable[str]) -> list[str]:
    """
    Mount one router per collection.

    Returns:
        The registered collection names, in order

    Raises:
        ValueError: If two names normalize to the same path
    """
    registered: list[str] = []
    seen: dict[str, str] = {}
    for name in collection_names:
        slug = normalize_collection_name(name)
        if slug in seen:
            raise ValueError(
                f"Collections {seen[slug]!r} and {name!r} both map to {API_PREFIX}/{slug}"
            )
        seen[slug] = name
        app.include_router(build_collection_router(name))
        registered.append(name)
    return registered


def describe_endpoints(collection_names: Iterable[str]) -> dict[str, dict[str, str]]:
    """Endpoint shapes per collection, for the discovery route."""
    endpoints = {}
    for name in collection_names:
        base = collection_path(name)
        endpoints[name] = {
            "create": f"POST {base}",
            "list": f"GET {base}?page=1&limit=10&sort=<json>&<field>=<value>",
            "get": f"GET {base}/:id",
            "replace": f"PUT {base}/:id",
            "update": f"PATCH {base}/:id",
            "delete": f"DELETE {base}/:id",
            "deleteMany": f"DELETE {base}",
        }
    return endpoints
