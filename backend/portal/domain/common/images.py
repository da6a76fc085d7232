"""Placeholder image URLs."""

from __future__ import annotations

import random
from typing import Optional

_SEED_URL = "https://picsum.photos/seed/{kind}{seed}/400/200.jpg"


def _seeded(kind: str) -> str:
    return _SEED_URL.format(kind=kind, seed=random.randrange(1000))


def random_event_image() -> str:
    return _seeded("event")


def random_announcement_image() -> str:
    return _seeded("announcement")


def replacement_image_url(broken_url: Optional[str]) -> str:
    """Pick a fresh seeded image for a URL that failed to load.

    The entity kind is guessed from the broken URL.
    """
    current = broken_url or ""
    if "event" in current:
        return _seeded("event")
    if "announcement" in current:
        return _seeded("announcement")
    return _seeded("fallback")
