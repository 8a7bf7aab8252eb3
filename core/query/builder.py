# =============================================================================
# core/query/builder.py - Advanced Results
# =============================================================================
# Builds a filtered, projected, sorted and paginated result page for a
# collection from raw query parameters:
#
#   ?select=name,careers&sort=-average_cost&page=2&limit=10&housing=true
#
# Response shape:
#   {"success": true, "count": 10,
#    "pagination": {"next": {"page": 3, "limit": 10}, "prev": {"page": 1, "limit": 10}},
#    "data": [...]}
# =============================================================================

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pymongo import ASCENDING, DESCENDING

from lib.mongo_client import MongoDatabase
from lib.utils import serialize_document
from .filters import Filter, parse_filters, to_mongo_filter

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
DEFAULT_SORT = [("created_at", DESCENDING)]

# skip and limit are sent to MongoDB as BSON int64
MAX_INT64 = 2**63 - 1

TotalMode = Literal["filtered", "collection"]


# =============================================================================
# Parsing Helpers
# =============================================================================

def parse_positive_int(value: str | None, default: int) -> int:
    """
    Parse a page/limit value, falling back to default.

    Anything that is not an integer in [1, MAX_INT64] ("abc", "", "0", "-3", or
    anything past int64) yields default.
    """
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if 1 <= number <= MAX_INT64 else default


def parse_projection(select: str | None, allowed_fields: Mapping[str, type]) -> dict[str, int] | None:
    """
    ?select=name,description -> {"name": 1, "description": 1}

    Returns None (full document) when select is absent or names no known field.
    """
    if not select:
        return None
    fields = [name.strip() for name in select.split(",") if name.strip() in allowed_fields]
    return {name: 1 for name in fields} or None


def parse_sort(sort: str | None, allowed_fields: Mapping[str, type]) -> list[tuple[str, int]]:
    """
    ?sort=-average_cost,name -> [("average_cost", -1), ("name", 1)]

    Defaults to newest first.
    """
    if not sort:
        return list(DEFAULT_SORT)

    keys = []
    for raw in sort.split(","):
        name = raw.strip()
        direction = ASCENDING
        if name.startswith("-"):
            name, direction = name[1:], DESCENDING
        if name in allowed_fields:
            keys.append((name, direction))
        elif name:
            logger.warning(f"Ignoring sort on unknown field: {name}")
    return keys or list(DEFAULT_SORT)


def _query_items(params: Any) -> list[tuple[str, str]]:
    # Starlette QueryParams keeps repeated keys in multi_items()
    if hasattr(params, "multi_items"):
        return list(params.multi_items())
    if isinstance(params, Mapping):
        return list(params.items())
    return list(params)


# =============================================================================
# Value Objects
# =============================================================================

@dataclass(frozen=True)
class PageWindow:
    """1-indexed page of `limit` items."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @property
    def start(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def end(self) -> int:
        return self.page * self.limit

    def pagination(self, total: int) -> dict[str, dict[str, int]]:
        """Descriptors of the adjacent pages that exist."""
        result = {}
        if self.end < total:
            result["next"] = {"page": self.page + 1, "limit": self.limit}
        if self.start > 0:
            result["prev"] = {"page": self.page - 1, "limit": self.limit}
        return result


@dataclass(frozen=True)
class Populate:
    """
    Relation expansion joined into each result.

    Forward (course -> bootcamp):
        Populate("bootcamp", "bootcamps", local_field="bootcamp", select=("name", "description"))
    Reverse (bootcamp -> courses):
        Populate("courses", "courses", local_field="_id", foreign_field="bootcamp", many=True)
    """
    path: str
    collection: str
    local_field: str
    foreign_field: str = "_id"
    select: tuple[str, ...] = ()
    many: bool = False


@dataclass
class ParsedQuery:
    """Everything the builder extracted from the query string."""
    filters: list[Filter] = field(default_factory=list)
    projection: dict[str, int] | None = None
    sort: list[tuple[str, int]] = field(default_factory=lambda: list(DEFAULT_SORT))
    window: PageWindow = field(default_factory=PageWindow)

    @property
    def mongo_filter(self) -> dict[str, Any]:
        return to_mongo_filter(self.filters)


# =============================================================================
# Query Builder
# =============================================================================

class QueryBuilder:
    """
    Advanced results for one collection.

    Example:
        builder = QueryBuilder(database, "courses", COURSE_FILTER_FIELDS, populate=BOOTCAMP_SUMMARY)
        page = builder.execute({"tuition[gte]": "1000", "page": "2"})
    """

    def __init__(
        self,
        database: MongoDatabase,
        collection: str,
        allowed_fields: Mapping[str, type],
        populate: Populate | None = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int | None = None,
        total_mode: TotalMode = "filtered",
    ):
        self.database = database
        self.collection = collection
        self.allowed_fields = allowed_fields
        self.populate = populate
        self.default_limit = default_limit
        self.max_limit = max_limit
        self.total_mode = total_mode

    def parse(self, params: Any) -> ParsedQuery:
        """Split reserved parameters from filters and parse both."""
        items = _query_items(params)
        # Last occurrence wins for reserved parameters
        reserved = dict(items)

        limit = parse_positive_int(reserved.get("limit"), self.default_limit)
        if self.max_limit is not None:
            limit = min(limit, self.max_limit)

        page = parse_positive_int(reserved.get("page"), DEFAULT_PAGE)
        if page * limit > MAX_INT64:
            logger.warning(f"Ignoring out-of-range page: {page} (limit {limit})")
            page = DEFAULT_PAGE

        return ParsedQuery(
            filters=parse_filters(items, self.allowed_fields),
            projection=parse_projection(reserved.get("select"), self.allowed_fields),
            sort=parse_sort(reserved.get("sort"), self.allowed_fields),
            window=PageWindow(
                page=page,
                limit=limit,
            ),
        )

    def execute(self, params: Any) -> dict[str, Any]:
        """
        Run the query and build the response body.

        Args:
            params: Query parameters (Starlette QueryParams, a dict, or pairs)

        Returns:
            {"success": True, "count", "pagination", "data"}
        """
        query = self.parse(params)
        mongo_filter = query.mongo_filter
        collection = self.database.collection(self.collection)

        total = collection.count_documents(
            mongo_filter if self.total_mode == "filtered" else {}
        )

        documents = list(
            collection.find(
                mongo_filter,
                query.projection,
                sort=query.sort,
                skip=query.window.start,
                limit=query.window.limit,
            )
        )

        if self.populate and documents:
            self._expand(documents)

        logger.debug(
            f"{self.collection}: filter={mongo_filter} page={query.window.page} "
            f"limit={query.window.limit} returned={len(documents)} total={total}"
        )

        return {
            "success": True,
            "count": len(documents),
            "pagination": query.window.pagination(total),
            "data": serialize_document(documents),
        }

    def _expand(self, documents: list[dict[str, Any]]) -> None:
        """Join the related documents into each result, in place."""
        populate = self.populate
        keys = {doc.get(populate.local_field) for doc in documents} - {None}

        related: list[dict[str, Any]] = []
        if keys:
            projection = None
            if populate.select:
                projection = {name: 1 for name in populate.select}
                projection[populate.foreign_field] = 1
            related = list(
                self.database.collection(populate.collection).find(
                    {populate.foreign_field: {"$in": list(keys)}},
                    projection,
                )
            )

        if populate.many:
            grouped: dict[Any, list[dict[str, Any]]] = defaultdict(list)
            for item in related:
                grouped[item.get(populate.foreign_field)].append(item)
            for doc in documents:
                doc[populate.path] = grouped.get(doc.get(populate.local_field), [])
            return

        by_key = {item.get(populate.foreign_field): item for item in related}
        for doc in documents:
            key = doc.get(populate.local_field)
            if key in by_key:
                doc[populate.path] = by_key[key]
