"""
Query Module for Snafles

Filter, sort and paginate in-memory record sets.
"""

from snafles.query.engine import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    CollectionQuery,
    Pagination,
    QueryResult,
    SortKey,
    apply_filters,
    clamp_page,
    contains_text,
    equals,
    flag,
    has_member,
    paginate,
    run_query,
    sort_records,
    within_range,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "CollectionQuery",
    "Pagination",
    "QueryResult",
    "SortKey",
    "apply_filters",
    "clamp_page",
    "contains_text",
    "equals",
    "flag",
    "has_member",
    "paginate",
    "run_query",
    "sort_records",
    "within_range",
]
