"""In-memory filter, sort and paginate helpers used by the listing endpoints.

Records may be mappings (rows, dicts) or plain objects (dataclasses, pydantic
models); fields are read with ``record_field`` either way. Every function
returns a new list and leaves its input untouched.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generic, Iterable, List, Literal, Mapping, Optional, Sequence, TypeVar

from portal.domain.common.dates import parse_datetime

T = TypeVar("T")

SortDirection = Literal["asc", "desc"]

PROFILE_SEARCH_FIELDS = (
    "full_name",
    "bio",
    "company",
    "job_title",
    "city",
    "country",
    "cohort",
    "professional_status",
)
EVENT_SEARCH_FIELDS = ("title", "description", "location")
ANNOUNCEMENT_SEARCH_FIELDS = ("title", "content")
RESIDENCY_PARTNER_SEARCH_FIELDS = ("name", "website", "description")


@dataclass(slots=True)
class FilterOptions:
    search: Optional[str] = None
    tags: Optional[List[str]] = None
    cohort: Optional[int] = None
    user_type: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class SortOption:
    field: str
    direction: SortDirection = "asc"
    nulls_first: bool = True


@dataclass(slots=True, frozen=True)
class PaginationOptions:
    page: int = 1
    limit: int = 12

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.limit < 1:
            raise ValueError("limit must be >= 1")


@dataclass(slots=True)
class PaginatedResult(Generic[T]):
    data: List[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 12
    total_pages: int = 0
    has_next: bool = False
    has_prev: bool = False


def record_field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _tag_matches(item_tag: Any, wanted: str) -> bool:
    if isinstance(item_tag, Mapping):
        return item_tag.get("name") == wanted
    name = getattr(item_tag, "name", None)
    if name is not None:
        return name == wanted
    return item_tag == wanted


def _matches(record: Any, filters: FilterOptions, search_fields: Sequence[str]) -> bool:
    if filters.search:
        needle = filters.search.lower()
        found = False
        for name in search_fields:
            value = record_field(record, name)
            if value and needle in str(value).lower():
                found = True
                break
        if not found:
            return False

    if filters.tags:
        item_tags = record_field(record, "tags")
        if not isinstance(item_tags, (list, tuple)):
            return False
        if not any(_tag_matches(item_tag, wanted) for wanted in filters.tags for item_tag in item_tags):
            return False

    if filters.cohort is not None and record_field(record, "cohort") != filters.cohort:
        return False

    if filters.user_type and record_field(record, "user_type") != filters.user_type:
        return False

    if filters.date_from is not None or filters.date_to is not None:
        when = parse_datetime(record_field(record, "date") or record_field(record, "created_at"))
        if when is None:
            return False
        if filters.date_from is not None and when < parse_datetime(filters.date_from):
            return False
        if filters.date_to is not None and when > parse_datetime(filters.date_to):
            return False

    return True


def filter_data(data: Iterable[T], filters: FilterOptions, search_fields: Sequence[str]) -> List[T]:
    """Keep records matching every supplied clause."""
    return [record for record in data if _matches(record, filters, search_fields)]


def sort_data(data: Iterable[T], sort: SortOption) -> List[T]:
    """Sort by a single field.

    Records whose field is ``None`` are grouped ahead of the rest when
    ``nulls_first`` is set, whatever the direction; otherwise they trail.
    Only the defined values are reversed for ``desc``. Equal keys keep their
    input order.
    """
    items = list(data)
    missing = [record for record in items if record_field(record, sort.field) is None]
    present = [record for record in items if record_field(record, sort.field) is not None]
    present.sort(key=lambda record: record_field(record, sort.field), reverse=sort.direction == "desc")
    return missing + present if sort.nulls_first else present + missing


def paginate_data(data: Sequence[T], pagination: PaginationOptions) -> PaginatedResult[T]:
    page, limit = pagination.page, pagination.limit
    start = (page - 1) * limit
    total = len(data)
    total_pages = math.ceil(total / limit)
    return PaginatedResult(
        data=list(data[start : start + limit]),
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def process_data(
    data: Iterable[T],
    filters: FilterOptions,
    sort: SortOption,
    pagination: PaginationOptions,
    search_fields: Sequence[str],
) -> PaginatedResult[T]:
    """Filter, then sort, then paginate."""
    filtered = filter_data(data, filters, search_fields)
    return paginate_data(sort_data(filtered, sort), pagination)


def filter_profiles(profiles: Iterable[T], filters: FilterOptions) -> List[T]:
    return filter_data(profiles, filters, PROFILE_SEARCH_FIELDS)


def filter_events(events: Iterable[T], filters: FilterOptions) -> List[T]:
    return filter_data(events, filters, EVENT_SEARCH_FIELDS)


def filter_announcements(announcements: Iterable[T], filters: FilterOptions) -> List[T]:
    return filter_data(announcements, filters, ANNOUNCEMENT_SEARCH_FIELDS)


def filter_residency_partners(partners: Iterable[T], filters: FilterOptions) -> List[T]:
    return filter_data(partners, filters, RESIDENCY_PARTNER_SEARCH_FIELDS)


def sort_profiles(profiles: Iterable[T], sort: SortOption) -> List[T]:
    return sort_data(profiles, sort)


def sort_events(events: Iterable[T], sort: SortOption) -> List[T]:
    return sort_data(events, sort)


def sort_announcements(announcements: Iterable[T], sort: SortOption) -> List[T]:
    return sort_data(announcements, sort)


def create_search_filter(term: Optional[str]) -> FilterOptions:
    cleaned = (term or "").strip()
    return FilterOptions(search=cleaned or None)


def create_tag_filter(tags: Optional[Sequence[str]]) -> FilterOptions:
    return FilterOptions(tags=list(tags) if tags else None)


def create_date_range_filter(
    date_from: Optional[datetime] = None, date_to: Optional[datetime] = None
) -> FilterOptions:
    return FilterOptions(date_from=date_from, date_to=date_to)


DEFAULT_SORT_OPTIONS = {
    "profiles": SortOption(field="full_name", direction="asc"),
    "events": SortOption(field="start_at", direction="desc"),
    "announcements": SortOption(field="created_at", direction="desc"),
}

DEFAULT_PAGINATION = PaginationOptions(page=1, limit=12)
