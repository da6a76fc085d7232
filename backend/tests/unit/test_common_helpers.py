import pytest

from portal.domain.common.arrays import chunk_array, group_by, shuffle_array, sort_by_multiple, unique_array
from portal.domain.common.images import random_announcement_image, random_event_image, replacement_image_url
from portal.domain.common.stats import percent
from portal.domain.common.validation import (
    validate_email,
    validate_min_length,
    validate_profile_form,
    validate_required,
    validate_url,
)


def test_chunk_array_keeps_remainder():
    assert chunk_array([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]
    with pytest.raises(ValueError):
        chunk_array([1], 0)


def test_unique_array_keeps_first_occurrence():
    rows = [{"id": 1, "n": "a"}, {"id": 2, "n": "b"}, {"id": 1, "n": "c"}]
    assert unique_array([3, 1, 3, 2, 1]) == [3, 1, 2]
    assert [r["n"] for r in unique_array(rows, key="id")] == ["a", "b"]


def test_group_by_stringifies_keys():
    groups = group_by([{"c": 1}, {"c": None}, {"c": 1}], "c")
    assert list(groups) == ["1", "None"]
    assert len(groups["1"]) == 2


def test_sort_by_multiple_orders_by_each_key():
    rows = [
        {"cohort": 2, "name": "b"},
        {"cohort": 1, "name": "z"},
        {"cohort": 2, "name": "a"},
        {"cohort": None, "name": "m"},
    ]
    result = sort_by_multiple(rows, ["cohort", "name"], ["desc", "asc"])
    assert [r["name"] for r in result] == ["m", "a", "b", "z"]


def test_shuffle_array_returns_new_permutation():
    items = list(range(20))
    shuffled = shuffle_array(items)
    assert sorted(shuffled) == items
    assert items == list(range(20))


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(5, 0) == 0


def test_seeded_images_carry_their_kind():
    assert random_event_image().startswith("https://picsum.photos/seed/event")
    assert random_announcement_image().startswith("https://picsum.photos/seed/announcement")
    assert "/seed/event" in replacement_image_url("https://picsum.photos/seed/event12/400/200.jpg")
    assert "/seed/fallback" in replacement_image_url(None)


@pytest.mark.parametrize(
    "email,ok",
    [("a@b.co", True), ("first.last@uni.ac.uk", True), ("no-at.example", False), ("a b@c.d", False), ("", False)],
)
def test_validate_email(email, ok):
    assert validate_email(email) is ok


@pytest.mark.parametrize(
    "url,ok",
    [
        ("https://github.com/ada", True),
        ("http://ada.dev/cv", True),
        ("mailto:a@b.co", False),
        ("javascript:alert(document.cookie)", False),
        ("github.com/ada", False),
        ("", False),
    ],
)
def test_validate_url(url, ok):
    assert validate_url(url) is ok


def test_required_and_min_length():
    assert not validate_required("  ", "title").is_valid
    assert validate_required("x", "title").is_valid
    assert validate_min_length("ab", 3, "title").errors == {"title": "title must be at least 3 characters"}
    assert validate_min_length("", 3, "title").is_valid


def test_profile_form_collects_every_error():
    result = validate_profile_form(
        {"full_name": "A", "email": "nope", "github_url": "github.com/ada", "website_url": "https://ada.dev"}
    )
    assert not result.is_valid
    assert set(result.errors) == {"full_name", "email", "github_url"}
