"""Query-string parsing for the filter/sort/paginate listings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional

from fastapi import HTTPException, Query, status

from portal.domain.common.pipeline import FilterOptions, PaginationOptions, SortOption


@dataclass
class ListingQuery:
    filters: FilterOptions
    sort: Optional[SortOption]
    pagination: PaginationOptions

    def sort_or(self, default: SortOption) -> SortOption:
        return self.sort or default


def listing_query(
    search: Optional[str] = Query(default=None, max_length=200),
    tags: Optional[List[str]] = Query(default=None),
    cohort: Optional[int] = Query(default=None),
    user_type: Optional[str] = Query(default=None),
    sort: Optional[str] = Query(default=None, max_length=64),
    direction: Literal["asc", "desc"] = Query(default="asc"),
    nulls_first: bool = Query(default=True),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
) -> ListingQuery:
    return ListingQuery(
        filters=FilterOptions(
            search=(search or "").strip() or None,
            tags=tags or None,
            cohort=cohort,
            user_type=user_type or None,
        ),
        sort=SortOption(field=sort, direction=direction, nulls_first=nulls_first) if sort else None,
        pagination=PaginationOptions(page=page, limit=limit),
    )


def resolve_sort(query: ListingQuery, allowed: tuple[str, ...], default: SortOption) -> SortOption:
    sort = query.sort_or(default)
    if sort.field not in allowed:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail="unsupported_sort_field")
    return sort
