"""
Query translation: request parameters to MongoDB filter, pagination and sort.

All functions here are pure.
"""
import json
import re
from typing import Any, Mapping

from bson import ObjectId

from gateway.core.errors import ValidationError


RESERVED_PARAMS = frozenset({"page", "limit", "sort"})

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
DEFAULT_SORT: list[tuple[str, int]] = [("createdAt", -1)]

_OBJECT_ID = re.compile(r"^[0-9a-fA-F]{24}$")

_DIRECTIONS = {
    1: 1,
    -1: -1,
    "1": 1,
    "-1": -1,
    "asc": 1,
    "ascending": 1,
    "desc": -1,
    "descending": -1,
}


def is_object_id(value: Any) -> bool:
    """True for a 24-character hex string."""
    return isinstance(value, str) and bool(_OBJECT_ID.match(value))


def parse_object_id(value: str) -> ObjectId:
    """Convert a path identifier, raising ValidationError on a bad format."""
    if not is_object_id(value):
        raise ValidationError(f"Invalid id format: {value!r}")
    return ObjectId(value)


def _contains_operator(value: Any) -> bool:
    """Whether a filter value carries a `$`-prefixed key at any depth."""
    if isinstance(value, dict):
        return any(
            str(key).startswith("$") or _contains_operator(item) for key, item in value.items()
        )
    if isinstance(value, (list, tuple)):
        return any(_contains_operator(item) for item in value)
    return False


def build_filter(
    params: Mapping[str, Any],
    reserved: frozenset[str] = RESERVED_PARAMS,
) -> dict[str, Any]:
    """
    Translate field/value pairs into a MongoDB filter.

    Reserved control parameters are skipped. Identifier-shaped strings become
    an exact ObjectId match, other strings a case-insensitive substring match
    (the value is escaped, so it is never interpreted as a pattern). Non-string
    values, which only arrive through JSON bodies, are matched exactly; values
    holding query operators are rejected.
    """
    query: dict[str, Any] = {}
    for field, value in params.items():
        if field in reserved:
            continue
        if not field or field.startswith("$"):
            raise ValidationError(f"Invalid filter field: {field!r}")
        if is_object_id(value):
            query[field] = ObjectId(value)
        elif isinstance(value, str):
            query[field] = {"$regex": re.escape(value), "$options": "i"}
        elif _contains_operator(value):
            raise ValidationError(f"Operators are not allowed in filter values: {field!r}")
        else:
            query[field] = value
    return query


def _positive_int(raw: Any, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if value > 0 else default


def parse_pagination(
    page: Any,
    limit: Any,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int | None = None,
) -> tuple[int, int]:
    """
    Coerce page/limit to positive integers.

    Invalid or non-positive values fall back to the defaults instead of
    failing the request.
    """
    page_num = _positive_int(page, DEFAULT_PAGE)
    limit_num = _positive_int(limit, default_limit)
    if max_limit is not None:
        limit_num = min(limit_num, max_limit)
    return page_num, limit_num


def _direction(field: str, raw: Any) -> int:
    key = raw.lower() if isinstance(raw, str) else raw
    if isinstance(key, bool) or not isinstance(key, (int, str)) or key not in _DIRECTIONS:
        raise ValidationError(f"Invalid sort direction for '{field}': {raw!r}")
    return _DIRECTIONS[key]


def parse_sort(raw: str | None) -> list[tuple[str, int]]:
    """
    Parse a sort specification.

    Accepts a JSON object (`{"price": 1, "createdAt": "desc"}`) or a
    comma-separated list of fields where a leading `-` means descending
    (`-createdAt,name`). Absent input sorts newest first.

    Raises:
        ValidationError: If the input cannot be parsed
    """
    if raw is None or not raw.strip():
        return list(DEFAULT_SORT)

    raw = raw.strip()
    if raw.startswith("{"):
        try:
            spec = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid sort parameter: {e.msg}")
        if not isinstance(spec, dict) or not spec:
            raise ValidationError("Invalid sort parameter: expected a non-empty object")
        return [(str(field), _direction(field, value)) for field, value in spec.items()]

    sort: list[tuple[str, int]] = []
    for part in raw.split(","):
        part = part.strip()
        direction = -1 if part.startswith("-") else 1
        field = part.lstrip("+-")
        if not field or not re.match(r"^[A-Za-z_][\w.]*$", field):
            raise ValidationError(f"Invalid sort parameter: {raw!r}")
        sort.append((field, direction))
    return sort


def page_count(total: int, limit: int) -> int:
    """Number of pages needed to show `total` items at `limit` per page."""
    return -(-total // limit) if total else 0
