"""JSON logging with per-request context.

The middleware binds the request id, route, caller and client address for the
duration of a request; every record emitted meanwhile carries them. Extra
fields are sanitised: sensitive keys are redacted and long values trimmed.
"""

from __future__ import annotations

import json
import logging
import random
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from portal.settings import settings

_CONTEXT: ContextVar[Mapping[str, str]] = ContextVar("portal_log_context", default={})

# context key -> output field
_CONTEXT_FIELDS = {"request_id": "request_id", "route": "route", "user_id": "user_id", "client_ip": "ip"}

_LOGGER_NAME = "portal"

_SENSITIVE_KEYWORDS = ("token", "secret", "authorization", "password", "email", "body")
# matched against whole underscore-separated parts so latency_ms survives
_SENSITIVE_PARTS = frozenset({"lat", "lng", "lon", "latitude", "longitude"})

_MAX_STRING_LENGTH = 256
_MAX_COLLECTION_ITEMS = 10
_ELLIPSIS = "…"

_RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def bind_context(**fields: Optional[str]) -> Token:
	"""Layer ``fields`` over the current context; pass the token to ``reset_context``."""
	merged = dict(_CONTEXT.get())
	merged.update({key: value for key, value in fields.items() if value is not None})
	return _CONTEXT.set(merged)


def reset_context(token: Token) -> None:
	_CONTEXT.reset(token)


def current_request_id() -> Optional[str]:
	return _CONTEXT.get().get("request_id")


def _sanitize_value(value: Any) -> Any:
	if value is None or isinstance(value, (bool, int, float)):
		return value
	if isinstance(value, str):
		return value if len(value) <= _MAX_STRING_LENGTH else value[:_MAX_STRING_LENGTH] + _ELLIPSIS
	if isinstance(value, Mapping):
		items = list(value.items())
		result = {str(key): _sanitize_field(str(key), nested) for key, nested in items[:_MAX_COLLECTION_ITEMS]}
		if len(items) > _MAX_COLLECTION_ITEMS:
			result[_ELLIPSIS] = f"+{len(items) - _MAX_COLLECTION_ITEMS} keys"
		return result
	if isinstance(value, (list, tuple, set, frozenset)):
		items = [_sanitize_value(item) for item in value]
		if len(items) > _MAX_COLLECTION_ITEMS:
			items = items[:_MAX_COLLECTION_ITEMS] + [_ELLIPSIS]
		return items
	return str(value)


def _sanitize_field(key: str, value: Any) -> Any:
	lowered = key.lower()
	if any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS) or _SENSITIVE_PARTS.intersection(lowered.split("_")):
		return "[redacted]"
	return _sanitize_value(value)


class JSONLogFormatter(logging.Formatter):
	"""One JSON object per record."""

	def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (match logging api)
		payload: Dict[str, Any] = {
			"ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
			"level": record.levelname.lower(),
			"msg": record.getMessage(),
			"logger": record.name,
			"service": settings.service_name,
			"env": settings.environment,
			"commit": settings.git_commit,
		}
		for key, value in _CONTEXT.get().items():
			payload[_CONTEXT_FIELDS.get(key, key)] = value
		if record.exc_info:
			payload["exc_info"] = self.formatException(record.exc_info)
		# Extras may refine context fields, e.g. the route template.
		for key, value in vars(record).items():
			if key not in _RESERVED_ATTRS:
				payload[key] = _sanitize_field(key, value)
		return json.dumps(payload, separators=(",", ":"), default=str)


class InfoSamplingFilter(logging.Filter):
	"""Randomly sample info-level logs, keep everything else."""

	def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
		if record.levelno != logging.INFO:
			return True
		rate = max(0.0, min(1.0, settings.obs_log_sampling_rate_info))
		return rate >= 1.0 or random.random() < rate


def configure_logging() -> logging.Logger:
	"""Route the root logger through a single JSON stream handler."""
	handler = logging.StreamHandler()
	handler.setFormatter(JSONLogFormatter())
	handler.addFilter(InfoSamplingFilter())
	root = logging.getLogger()
	root.handlers[:] = [handler]
	root.setLevel(settings.obs_log_level)
	return logging.getLogger(_LOGGER_NAME)


def get_logger(name: Optional[str] = None) -> logging.Logger:
	return logging.getLogger(name or _LOGGER_NAME)
