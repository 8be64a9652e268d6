"""
Pagination, Filtering and Sorting

Shared contract used by every list endpoint:

1. ``resolve_page`` turns untrusted ``page``/``limit`` query values into a
   bounded ``PageDirective`` (page in [1, MAX_PAGE], limit in [1, 100]).
2. ``resolve_sort`` restricts sorting to a resource-supplied allow-list of
   fields and normalizes the direction.
3. ``build_page_meta`` computes the response metadata from a total count.

Parsing is permissive on purpose: paging values are display parameters, so
malformed input falls back to defaults instead of failing the request.
Nothing in this module raises on bad input.

Typical use inside a service::

    directive = resolve_page(page.page, page.limit)
    order = resolve_sort(page.sort_by, page.sort_order, SORT_COLUMNS, "created_at")
    rows, total = await paginate(db, query, directive, order_by_clauses(order, SORT_COLUMNS))
    return PaginatedResponse(data=rows, pagination=build_page_meta(total, directive.page, directive.limit))
"""

import logging
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Any, Generic, Literal, TypeVar

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Largest page whose offset still fits a signed 64-bit OFFSET
MAX_PAGE = (2**63 - 1) // MAX_LIMIT
DEFAULT_SORT_ORDER = "desc"

SortOrder = Literal["asc", "desc"]

T = TypeVar("T")


def _parse_int(value: Any) -> int | None:
    """
    Parse a raw query value as an integer.

    Accepts ints, integral floats and numeric strings (surrounding whitespace
    allowed). Booleans and everything else yield None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _normalize_order(sort_order: Any) -> SortOrder:
    if isinstance(sort_order, str) and sort_order.strip().lower() == "asc":
        return "asc"
    return "desc"


@dataclass(frozen=True)
class PageDirective:
    """Resolved, safe paging parameters for a query."""

    page: int
    limit: int
    skip: int
    take: int


def resolve_page(raw_page: Any = None, raw_limit: Any = None) -> PageDirective:
    """
    Resolve raw page/limit values into a bounded paging directive.

    Args:
        raw_page: Requested page (1-based). Anything that is not an integer
            >= 1 resolves to page 1. Pages beyond MAX_PAGE are clamped to it.
        raw_limit: Requested page size. Values above the maximum are clamped
            to 100; missing, non-numeric, zero or negative values resolve to 10.

    Returns:
        PageDirective with ``skip = (page - 1) * limit`` and ``take = limit``
    """
    page = _parse_int(raw_page)
    if page is None or page < 1:
        page = DEFAULT_PAGE
    elif page > MAX_PAGE:
        page = MAX_PAGE

    limit = _parse_int(raw_limit)
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    elif limit > MAX_LIMIT:
        limit = MAX_LIMIT

    if (page, limit) != (raw_page, raw_limit):
        logger.debug(f"Resolved paging page={raw_page!r} limit={raw_limit!r} -> {page}/{limit}")

    return PageDirective(page=page, limit=limit, skip=(page - 1) * limit, take=limit)


def resolve_sort(
    sort_by: Any,
    sort_order: Any,
    allowed_fields: Collection[str],
    default_field: str,
) -> dict[str, SortOrder]:
    """
    Resolve a sort request against a resource's allow-list.

    Args:
        sort_by: Requested field name (untrusted)
        sort_order: Requested direction; anything but "asc"/"desc" means "desc"
        allowed_fields: Fields the resource permits sorting on
        default_field: Field used when ``sort_by`` is missing or not allowed

    Returns:
        Single-entry mapping of field name to direction. When the requested
        field is rejected the default field is sorted descending.
    """
    if not isinstance(sort_by, str) or sort_by not in allowed_fields:
        if sort_by:
            logger.debug(f"Ignoring sort field not in allow-list: {sort_by!r}")
        return {default_field: DEFAULT_SORT_ORDER}

    return {sort_by: _normalize_order(sort_order)}


class PageMeta(BaseModel):
    """Pagination metadata returned with every list response."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    total_records: int = Field(..., ge=0, description="Total records matching the filters")
    total_pages: int = Field(..., ge=0, description="Number of pages at the current limit")
    current_page: int = Field(..., ge=1, description="Page returned")
    records_per_page: int = Field(..., ge=1, description="Page size used")

    @computed_field(alias="hasNextPage")
    @property
    def has_next_page(self) -> bool:
        return self.current_page * self.records_per_page < self.total_records

    @computed_field(alias="hasPreviousPage")
    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1


def build_page_meta(total_records: int, page: int, limit: int) -> PageMeta:
    """
    Build pagination metadata for a result set.

    ``totalPages`` is ``ceil(total_records / limit)``, so an empty result
    reports zero pages. The current page is echoed back as requested.
    """
    total_records = max(0, total_records)
    limit = max(1, limit)
    page = max(1, page)

    total_pages = -(-total_records // limit)

    return PageMeta(
        total_records=total_records,
        total_pages=total_pages,
        current_page=page,
        records_per_page=limit,
    )


class PaginatedResponse(BaseModel, Generic[T]):
    """List payload: one page of records plus its metadata."""

    data: list[T]
    pagination: PageMeta


class PageRequest(BaseModel):
    """Normalized paging and sorting request."""

    page: int = Field(DEFAULT_PAGE, ge=1, le=MAX_PAGE)
    limit: int = Field(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    sort_by: str | None = None
    sort_order: SortOrder = DEFAULT_SORT_ORDER

    @classmethod
    def from_raw(
        cls,
        page: Any = None,
        limit: Any = None,
        sort_by: Any = None,
        sort_order: Any = None,
    ) -> "PageRequest":
        """Build a request from raw query values, defaulting anything malformed."""
        directive = resolve_page(page, limit)
        return cls(
            page=directive.page,
            limit=directive.limit,
            sort_by=sort_by if isinstance(sort_by, str) and sort_by else None,
            sort_order=_normalize_order(sort_order),
        )

    def to_directive(self) -> PageDirective:
        return resolve_page(self.page, self.limit)


def page_query(
    page: str | None = Query(None, description="Page number (1-based). Default: 1"),
    limit: str | None = Query(None, description="Records per page (1-100). Default: 10"),
    sort_by: str | None = Query(None, alias="sortBy", description="Field to sort by"),
    sort_order: str | None = Query(
        None, alias="sortOrder", description="Sort direction (asc/desc). Default: desc"
    ),
) -> PageRequest:
    """
    FastAPI dependency collecting paging parameters.

    Values are received as plain strings so malformed input never triggers a
    validation error; it is defaulted by ``PageRequest.from_raw`` instead.
    """
    return PageRequest.from_raw(page, limit, sort_by, sort_order)


def order_by_clauses(order: Mapping[str, SortOrder], columns: Mapping[str, Any]) -> list[Any]:
    """
    Convert a resolved sort directive into SQLAlchemy ORDER BY clauses.

    Args:
        order: Output of ``resolve_sort``
        columns: Resource mapping of sortable field name to column expression
    """
    clauses = []
    for field, direction in order.items():
        column = columns[field]
        clauses.append(column.asc() if direction == "asc" else column.desc())
    return clauses


async def paginate(
    db: AsyncSession,
    query: Select,
    directive: PageDirective,
    order_by: list[Any],
) -> tuple[list[Any], int]:
    """
    Run the count and windowed fetch for a filtered query.

    Args:
        db: Database session
        query: Filtered ``select()`` without ordering or limits
        directive: Resolved paging parameters
        order_by: ORDER BY clauses from ``order_by_clauses``

    Returns:
        Tuple of (rows on the requested page, total rows matching the query)
    """
    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    window_query = query.order_by(*order_by).offset(directive.skip).limit(directive.take)
    result = await db.execute(window_query)
    rows = list(result.scalars().all())

    return rows, total


__all__ = [
    "DEFAULT_LIMIT",
    "DEFAULT_PAGE",
    "MAX_LIMIT",
    "PageDirective",
    "PageMeta",
    "PageRequest",
    "PaginatedResponse",
    "SortOrder",
    "build_page_meta",
    "order_by_clauses",
    "page_query",
    "paginate",
    "resolve_page",
    "resolve_sort",
]
