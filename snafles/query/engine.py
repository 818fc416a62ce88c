"""
Collection Query Engine

Generic filter -> sort -> paginate pipeline over in-memory records.

Filters:
    Built by small factories (``equals``, ``contains_text``, ``within_range``,
    ``flag``, ``has_member``). A factory given an omitted argument returns
    ``None`` and is dropped, so the conjunction of the remaining predicates
    can only narrow the result.

Sorting:
    One named key per query. Every order is stable: records that compare
    equal keep their input order, also for descending keys.

Pagination:
    1-indexed pages. ``start = (page-1)*limit``; out-of-range pages are
    empty. Non-positive page becomes 1, non-positive limit becomes the
    default size and limits above the maximum are capped.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Sequence


DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

Predicate = Callable[[Any], bool]

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


# =============================================================================
# Filters
# =============================================================================

def equals(field_name: str, value: Any) -> Optional[Predicate]:
    """Exact match on a field."""
    if value is None:
        return None
    return lambda record: getattr(record, field_name, None) == value


def contains_text(field_names: Sequence[str], needle: Optional[str]) -> Optional[Predicate]:
    """
    Case-insensitive substring match over one or more text fields.

    Matches when the needle occurs in any of the fields. List-valued
    fields (tags) match when any element contains it.
    """
    if not needle:
        return None
    needle_lower = needle.lower()

    def _matches(record: Any) -> bool:
        for name in field_names:
            value = getattr(record, name, None)
            if value is None:
                continue
            values = value if isinstance(value, (list, tuple)) else [value]
            if any(needle_lower in str(v).lower() for v in values):
                return True
        return False

    return _matches


def within_range(
    field_name: str,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> Optional[Predicate]:
    """
    Inclusive numeric range. Records without a value never match.

    Raises:
        ValueError: A bound is NaN.
    """
    if minimum is None and maximum is None:
        return None
    for bound in (minimum, maximum):
        if bound is not None and math.isnan(bound):
            raise ValueError(f"Range bound for {field_name} must be a number, got NaN")

    def _matches(record: Any) -> bool:
        value = getattr(record, field_name, None)
        if value is None:
            return False
        if minimum is not None and value < minimum:
            return False
        if maximum is not None and value > maximum:
            return False
        return True

    return _matches


def flag(field_name: str, expected: Optional[bool]) -> Optional[Predicate]:
    """Boolean flag match."""
    if expected is None:
        return None
    return lambda record: bool(getattr(record, field_name, False)) == expected


def has_member(field_name: str, value: Any) -> Optional[Predicate]:
    """Membership in a list-valued field."""
    if value is None:
        return None
    return lambda record: value in (getattr(record, field_name, None) or ())


# =============================================================================
# Sorting
# =============================================================================

class SortKey(str, Enum):
    """Supported total orders."""
    NAME = "name"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    RATING = "rating"
    NEWEST = "newest"


def _name_key(record: Any) -> str:
    return (getattr(record, "name", None) or "").casefold()


def _price_key(record: Any) -> float:
    return getattr(record, "price", None) or 0.0


def _rating_key(record: Any) -> float:
    return getattr(record, "rating", None) or 0.0


def _created_key(record: Any) -> datetime:
    return getattr(record, "created_at", None) or _OLDEST


# key -> (key function, descending)
_SORTS: dict[SortKey, tuple[Callable[[Any], Any], bool]] = {
    SortKey.NAME: (_name_key, False),
    SortKey.PRICE_LOW: (_price_key, False),
    SortKey.PRICE_HIGH: (_price_key, True),
    SortKey.RATING: (_rating_key, True),
    SortKey.NEWEST: (_created_key, True),
}


def sort_records(records: Iterable[Any], sort: SortKey = SortKey.NAME) -> list[Any]:
    """Stable sort by a named key."""
    key_func, descending = _SORTS[SortKey(sort)]
    # sorted() keeps equal elements in input order even with reverse=True
    return sorted(records, key=key_func, reverse=descending)


# =============================================================================
# Pagination
# =============================================================================

@dataclass
class Pagination:
    """Page metadata for a list response."""

    current_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool


def clamp_page(
    page: Optional[int],
    limit: Optional[int],
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> tuple[int, int]:
    """Normalize raw page/limit input."""
    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else default_limit
    return page, min(limit, max_limit)


def paginate(records: Sequence[Any], page: int, limit: int) -> tuple[list[Any], Pagination]:
    """
    Slice one page out of records.

    Args:
        records: Filtered and sorted records
        page: 1-based page number (already clamped)
        limit: Page size (already clamped)

    Returns:
        (page of records, pagination metadata)
    """
    total = len(records)
    start = (page - 1) * limit
    end = start + limit

    return list(records[start:end]), Pagination(
        current_page=page,
        total_pages=math.ceil(total / limit),
        total=total,
        has_next=end < total,
        has_prev=page > 1,
    )


# =============================================================================
# Query
# =============================================================================

@dataclass
class CollectionQuery:
    """A full filter/sort/page request against a record set."""

    filters: list[Optional[Predicate]] = field(default_factory=list)
    sort: Optional[SortKey] = SortKey.NAME
    page: Optional[int] = 1
    limit: Optional[int] = DEFAULT_PAGE_SIZE


@dataclass
class QueryResult:
    """Items on the requested page plus metadata."""

    items: list[Any]
    pagination: Pagination


def apply_filters(records: Iterable[Any], filters: Iterable[Optional[Predicate]]) -> list[Any]:
    """Keep records that satisfy every supplied predicate."""
    active = [f for f in filters if f is not None]
    return [r for r in records if all(f(r) for f in active)]


def run_query(
    records: Iterable[Any],
    query: CollectionQuery,
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> QueryResult:
    """
    Run filter -> sort -> paginate over records.

    A ``sort`` of None keeps the filtered records in input order.
    """
    matched = apply_filters(records, query.filters)
    if query.sort is not None:
        matched = sort_records(matched, query.sort)

    page, limit = clamp_page(query.page, query.limit, default_limit, max_limit)
    items, pagination = paginate(matched, page, limit)
    return QueryResult(items=items, pagination=pagination)
