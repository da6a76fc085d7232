from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Tag:
    id: str
    name: str
    color: str
