from datetime import datetime, timezone

import pytest

from portal.domain.common.pipeline import (
    DEFAULT_PAGINATION,
    DEFAULT_SORT_OPTIONS,
    FilterOptions,
    PaginationOptions,
    SortOption,
    create_date_range_filter,
    create_search_filter,
    create_tag_filter,
    filter_announcements,
    filter_events,
    filter_profiles,
    paginate_data,
    process_data,
    sort_data,
    sort_profiles,
    PROFILE_SEARCH_FIELDS,
)
from portal.domain.events.models import Event
from portal.domain.profiles.models import Profile
from portal.domain.tags.models import Tag


def _profiles():
    return [
        Profile(id="1", user_id="u1", full_name="Ada Lovelace", company="Analytical", cohort=1, user_type="Alum"),
        Profile(id="2", user_id="u2", full_name="Grace Hopper", company="Navy", cohort=2, user_type="Staff"),
        Profile(id="3", user_id="u3", full_name=None, company="Stripe", cohort=1, user_type="Alum"),
        Profile(id="4", user_id="u4", full_name="Alan Turing", bio="codebreaker", cohort=3, user_type="Admin"),
    ]


def test_empty_filter_keeps_everything_in_order():
    profiles = _profiles()
    assert filter_profiles(profiles, FilterOptions()) == profiles


def test_search_is_case_insensitive_across_fields():
    result = filter_profiles(_profiles(), create_search_filter("  CODEBREAK "))
    assert [p.id for p in result] == ["4"]


def test_search_skips_missing_fields():
    result = filter_profiles(_profiles(), FilterOptions(search="stripe"))
    assert [p.id for p in result] == ["3"]


def test_cohort_and_user_type_are_combined():
    result = filter_profiles(_profiles(), FilterOptions(cohort=1, user_type="Alum"))
    assert [p.id for p in result] == ["1", "3"]


def test_filter_does_not_mutate_input():
    profiles = _profiles()
    snapshot = list(profiles)
    filter_profiles(profiles, FilterOptions(search="ada"))
    assert profiles == snapshot


def test_tag_filter_matches_any_tag_by_name():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    events = [
        Event(id="e1", title="Mixer", start_at=start, tags=[Tag("t1", "Social", "#ef4444")]),
        Event(id="e2", title="Talk", start_at=start, tags=[Tag("t2", "Technical", "#06b6d4")]),
        Event(id="e3", title="Untagged", start_at=start),
    ]
    result = filter_events(events, create_tag_filter(["Social", "Career"]))
    assert [e.id for e in result] == ["e1"]


def test_tag_filter_excludes_records_without_tag_list():
    records = [{"title": "a", "tags": None}, {"title": "b", "tags": ["x"]}]
    result = filter_announcements(records, FilterOptions(tags=["x"]))
    assert [r["title"] for r in result] == ["b"]


def test_date_range_filter_uses_date_then_created_at():
    records = [
        {"title": "a", "date": "2024-03-01T00:00:00Z"},
        {"title": "b", "created_at": datetime(2024, 5, 1)},
        {"title": "c"},
    ]
    filters = create_date_range_filter(datetime(2024, 2, 1, tzinfo=timezone.utc), datetime(2024, 4, 1))
    result = filter_announcements(records, filters)
    assert [r["title"] for r in result] == ["a"]


def test_sort_puts_nulls_first_in_both_directions():
    asc = sort_data(_profiles(), SortOption(field="full_name"))
    desc = sort_data(_profiles(), SortOption(field="full_name", direction="desc"))
    assert [p.id for p in asc] == ["3", "1", "4", "2"]
    assert [p.id for p in desc] == ["3", "2", "4", "1"]


def test_sort_nulls_last_when_requested():
    result = sort_data(_profiles(), SortOption(field="full_name", nulls_first=False))
    assert [p.id for p in result][-1] == "3"


def test_sort_is_stable_for_equal_keys():
    records = [{"k": 1, "id": "a"}, {"k": 0, "id": "b"}, {"k": 1, "id": "c"}]
    result = sort_data(records, SortOption(field="k", direction="desc"))
    assert [r["id"] for r in result] == ["a", "c", "b"]


def test_paginate_reports_bounds():
    data = list(range(25))
    first = paginate_data(data, PaginationOptions(page=1, limit=10))
    last = paginate_data(data, PaginationOptions(page=3, limit=10))
    assert first.data == list(range(10))
    assert first.total_pages == 3
    assert first.has_next and not first.has_prev
    assert last.data == [20, 21, 22, 23, 24]
    assert last.has_prev and not last.has_next


def test_paginate_past_the_end_is_empty():
    result = paginate_data([1, 2, 3], PaginationOptions(page=5, limit=2))
    assert result.data == []
    assert result.total == 3
    assert result.total_pages == 2
    assert result.has_prev and not result.has_next


def test_paginate_empty_input():
    result = paginate_data([], PaginationOptions())
    assert result.total == 0
    assert result.total_pages == 0
    assert not result.has_next and not result.has_prev


@pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5)])
def test_pagination_rejects_non_positive_values(page, limit):
    with pytest.raises(ValueError):
        PaginationOptions(page=page, limit=limit)


def test_process_data_filters_before_paginating():
    result = process_data(
        _profiles(),
        FilterOptions(user_type="Alum"),
        DEFAULT_SORT_OPTIONS["profiles"],
        PaginationOptions(page=1, limit=1),
        PROFILE_SEARCH_FIELDS,
    )
    assert result.total == 2
    assert result.total_pages == 2
    assert [p.id for p in result.data] == ["3"]


NAMES = [
    {"full_name": "John Doe", "job_title": "Software Engineer"},
    {"full_name": "Jane Smith", "job_title": "Designer"},
    {"full_name": "Bob Johnson", "job_title": "Data Engineer"},
]


def test_search_matches_substrings_in_any_name():
    result = filter_profiles(NAMES, FilterOptions(search="john"))
    assert [r["full_name"] for r in result] == ["John Doe", "Bob Johnson"]


def test_name_sort_both_directions():
    asc = sort_data(NAMES, SortOption(field="full_name"))
    desc = sort_data(NAMES, SortOption(field="full_name", direction="desc"))
    assert [r["full_name"] for r in asc] == ["Bob Johnson", "Jane Smith", "John Doe"]
    assert [r["full_name"] for r in desc] == ["John Doe", "Jane Smith", "Bob Johnson"]


def test_process_data_is_independent_of_input_order():
    expected = ["Bob Johnson", "John Doe"]
    for data in (NAMES, list(reversed(NAMES))):
        result = process_data(
            data,
            create_search_filter("engineer"),
            SortOption(field="full_name"),
            PaginationOptions(page=1, limit=10),
            PROFILE_SEARCH_FIELDS,
        )
        assert [r["full_name"] for r in result.data] == expected


def test_three_items_over_two_pages():
    first = paginate_data(NAMES, PaginationOptions(page=1, limit=2))
    second = paginate_data(NAMES, PaginationOptions(page=2, limit=2))
    assert (len(first.data), first.has_next, first.has_prev) == (2, True, False)
    assert (len(second.data), second.has_next, second.has_prev) == (1, False, True)


def test_default_profile_listing():
    result = paginate_data(sort_profiles(_profiles(), DEFAULT_SORT_OPTIONS["profiles"]), DEFAULT_PAGINATION)
    assert (result.page, result.limit) == (1, 12)
    assert [p.id for p in result.data] == ["3", "1", "4", "2"]
