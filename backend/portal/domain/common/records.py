"""Row to dataclass conversion."""

from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Mapping, Optional, Type, TypeVar
from uuid import UUID

from portal.obs import metrics as obs_metrics

R = TypeVar("R")


def from_row(cls: Type[R], row: Optional[Mapping[str, Any]], **overrides: Any) -> R:
    """Build ``cls`` from the row columns it declares; extra columns are ignored.

    UUID values are rendered as strings so records serialise cleanly.
    """
    data = dict(row or {})
    data.update(overrides)
    kwargs = {}
    for f in fields(cls):  # type: ignore[arg-type]
        if not f.init or f.name not in data:
            continue
        value = data[f.name]
        kwargs[f.name] = str(value) if isinstance(value, UUID) else value
    return cls(**kwargs)


def log_failure(logger: logging.Logger, operation: str, **extra: Any) -> None:
    """Log the active exception and count it against ``operation``."""
    logger.exception("%s failed", operation, extra={"operation": operation, **extra})
    obs_metrics.inc_domain_failure(operation)
