"""Small list helpers shared by the dashboard and report code."""

from __future__ import annotations

import random
from typing import Any, Dict, Iterable, List, Optional, Sequence, TypeVar

from portal.domain.common.pipeline import record_field

T = TypeVar("T")


def chunk_array(items: Sequence[T], size: int) -> List[List[T]]:
    if size < 1:
        raise ValueError("size must be >= 1")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


def unique_array(items: Iterable[T], key: Optional[str] = None) -> List[T]:
    """Drop duplicates, keeping the first occurrence (by ``key`` when given)."""
    seen: set[Any] = set()
    result: List[T] = []
    for item in items:
        marker = record_field(item, key) if key else item
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
    return result


def group_by(items: Iterable[T], key: str) -> Dict[str, List[T]]:
    groups: Dict[str, List[T]] = {}
    for item in items:
        value = record_field(item, key)
        groups.setdefault("None" if value is None else str(value), []).append(item)
    return groups


def sort_by_multiple(items: Iterable[T], keys: Sequence[str], directions: Sequence[str] = ()) -> List[T]:
    """Stable multi-key sort; ``None`` values sort ahead within each key."""
    result = list(items)
    # Apply keys from least to most significant so stability does the rest.
    for index in reversed(range(len(keys))):
        name = keys[index]
        descending = index < len(directions) and directions[index] == "desc"
        missing = [item for item in result if record_field(item, name) is None]
        present = [item for item in result if record_field(item, name) is not None]
        present.sort(key=lambda item: record_field(item, name), reverse=descending)
        result = missing + present
    return result


def shuffle_array(items: Iterable[T]) -> List[T]:
    shuffled = list(items)
    random.shuffle(shuffled)
    return shuffled
