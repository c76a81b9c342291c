"""
Generic collection service: the CRUD operations shared by every collection.
"""
import asyncio
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from bson import ObjectId
from bson.errors import InvalidDocument
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError, WriteError

from gateway.core.errors import NotFoundError, StoreError, ValidationError
from gateway.services.query import (
    build_filter,
    page_count,
    parse_object_id,
    parse_pagination,
    parse_sort,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

ID_FIELD = "_id"
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"
RESERVED_FIELDS = frozenset({ID_FIELD, CREATED_AT, UPDATED_AT})


class MillisecondClock:
    """
    UTC clock at the millisecond precision BSON stores.

    Readings never repeat and never go backwards: a reading that would not be
    later than the previous one is moved 1ms past it. Creates and updates take
    their timestamps from one shared instance, so `updatedAt` after an update
    is always later than the value it replaces.
    """

    def __init__(self, source: Callable[[], datetime] = lambda: datetime.now(timezone.utc)):
        self._source = source
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def __call__(self) -> datetime:
        now = self._source()
        now = now.replace(microsecond=(now.microsecond // 1000) * 1000)
        with self._lock:
            if self._last is not None and now <= self._last:
                now = self._last + timedelta(milliseconds=1)
            self._last = now
        return now


utc_now = MillisecondClock()


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def serialize_value(value: Any) -> Any:
    """Convert BSON values into JSON-friendly ones, recursively."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return _format_datetime(value)
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_value(v) for v in value]
    return value


def serialize_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Render a stored document for a response body."""
    return serialize_value(dict(document))


class CollectionService:
    """
    CRUD operations against a single collection handle.

    The service holds no state besides the handle and its settings, so one
    instance per request is cheap. Each write is a single atomic store call.
    """

    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        timeout_seconds: Optional[float] = 10.0,
        clock: Callable[[], datetime] = utc_now,
        default_limit: int = 10,
        max_limit: Optional[int] = 100,
    ):
        self.collection = collection
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.default_limit = default_limit
        self.max_limit = max_limit

    @property
    def name(self) -> str:
        return self.collection.name

    # ==================== Store access ====================

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        """Await a store call, bounding it by the timeout and mapping failures."""
        try:
            return await asyncio.wait_for(awaitable, self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(
                "Store %s on '%s' timed out after %ss",
                operation, self.name, self.timeout_seconds,
                extra={"collection": self.name},
            )
            raise StoreError()
        except (WriteError, InvalidDocument) as e:
            logger.warning(
                "Store rejected %s on '%s': %s", operation, self.name, e,
                extra={"collection": self.name},
            )
            raise ValidationError(f"Invalid document: {e}")
        except PyMongoError as e:
            logger.error(
                "Store %s on '%s' failed: %s", operation, self.name, e,
                extra={"collection": self.name},
            )
            raise StoreError()

    @staticmethod
    def _clean_body(body: Any) -> dict[str, Any]:
        """Copy a request body without the server-assigned fields."""
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        return {k: v for k, v in body.items() if k not in RESERVED_FIELDS}

    # ==================== Operations ====================

    async def create(self, body: Any) -> dict[str, Any]:
        """Insert a document with a fresh identifier and both timestamps."""
        document = self._clean_body(body)
        now = self.clock()
        document[CREATED_AT] = now
        document[UPDATED_AT] = now

        result = await self._call("insert", self.collection.insert_one(document))
        document[ID_FIELD] = result.inserted_id
        logger.debug(
            "Created %s in '%s'", result.inserted_id, self.name,
            extra={"collection": self.name, "document_id": str(result.inserted_id)},
        )
        return serialize_document(document)

    async def list_documents(
        self, params: Mapping[str, Any]
    ) -> tuple[list[dict], dict[str, int]]:
        """
        List matching documents, sorted and paginated.

        Args:
            params: Query parameters; `page`, `limit` and `sort` control the
                page, every other key is a field filter

        Returns:
            (documents, pagination) where pagination holds page, limit, total
            and pages
        """
        query = build_filter(params)
        sort = parse_sort(params.get("sort"))
        page, limit = parse_pagination(
            params.get("page"),
            params.get("limit"),
            default_limit=self.default_limit,
            max_limit=self.max_limit,
        )
        skip = (page - 1) * limit

        total = await self._call("count", self.collection.count_documents(query))
        cursor = self.collection.find(query).sort(sort).skip(skip).limit(limit)
        documents = await self._call("find", cursor.to_list(length=limit))

        pagination = {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": page_count(total, limit),
        }
        return [serialize_document(d) for d in documents], pagination

    async def get(self, document_id: str) -> dict[str, Any]:
        """Fetch one document by identifier."""
        oid = parse_object_id(document_id)
        document = await self._call("find_one", self.collection.find_one({ID_FIELD: oid}))
        if document is None:
            raise NotFoundError()
        return serialize_document(document)

    async def update(self, document_id: str, body: Any) -> dict[str, Any]:
        """
        Merge the body into an existing document and refresh `updatedAt`.

        Fields absent from the body are kept; `createdAt` and `_id` never
        change.
        """
        oid = parse_object_id(document_id)
        changes = self._clean_body(body)
        changes[UPDATED_AT] = self.clock()

        document = await self._call(
            "update",
            self.collection.find_one_and_update(
                {ID_FIELD: oid},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            ),
        )
        if document is None:
            raise NotFoundError()
        return serialize_document(document)

    async def replace(self, document_id: str, body: Any) -> dict[str, Any]:
        """PUT shares the merge semantics of `update`."""
        return await self.update(document_id, body)

    async def delete(self, document_id: str) -> dict[str, Any]:
        """Remove one document and return it."""
        oid = parse_object_id(document_id)
        document = await self._call(
            "delete", self.collection.find_one_and_delete({ID_FIELD: oid})
        )
        if document is None:
            raise NotFoundError()
        return serialize_document(document)

    async def delete_many(
        self, filter_params: Optional[Mapping[str, Any]] = None, confirm: bool = False
    ) -> int:
        """
        Remove every document matching the filter.

        An empty filter matches the whole collection and is refused unless
        `confirm` is set.

        Returns:
            Number of deleted documents
        """
        query = build_filter(filter_params or {}, reserved=frozenset())
        if not query and not confirm:
            raise ValidationError(
                "Refusing to delete all documents: provide a filter or set confirmDeleteAll to true"
            )

        result = await self._call("delete_many", self.collection.delete_many(query))
        logger.info(
            "Deleted %d document(s) from '%s'", result.deleted_count, self.name,
            extra={"collection": self.name},
        )
        return result.deleted_count
