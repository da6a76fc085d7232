from __future__ import annotations

import math


def percent(part: float, total: float) -> int:
    """Whole-number percentage, halves rounded up; 0 when total is 0."""
    if not total:
        return 0
    return int(math.floor(part / total * 100 + 0.5))
