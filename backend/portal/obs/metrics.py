"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, Histogram, Summary

log = logging.getLogger(__name__)


REQUEST_COUNTER = Counter(
	"portal_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"portal_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

DOMAIN_FAILURES = Counter(
	"portal_domain_failures_total",
	"Domain operations that failed and fell back to a default result",
	["operation"],
)

CONTENT_WRITES = Counter(
	"portal_content_writes_total",
	"Content mutations segmented by entity and action",
	["entity", "action"],
)

PROFILE_UPDATES = Counter(
	"portal_profile_updates_total",
	"Profile updates persisted",
)

REMINDER_CHANGES = Counter(
	"portal_reminder_changes_total",
	"Reminder create/remove operations",
	["action"],
)

ADMIN_ACTIONS = Counter(
	"portal_admin_actions_total",
	"Administrative actions performed",
	["action"],
)

GEOCODE_LOOKUPS = Counter(
	"portal_geocode_lookups_total",
	"Geocoding lookups by result",
	["result"],
)

GEOCODE_LATENCY = Summary(
	"portal_geocode_latency_seconds",
	"Geocoding request latency (seconds)",
)

SEARCH_QUERIES = Counter(
	"portal_search_queries_total",
	"Profile searches executed",
)

POSTGRES_UP = Gauge("portal_postgres_up", "Postgres availability (1=up,0=down)")
POSTGRES_LATENCY = Summary("portal_postgres_latency_seconds", "Postgres ping latency (seconds)")


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def inc_domain_failure(operation: str) -> None:
	DOMAIN_FAILURES.labels(operation=operation).inc()


def inc_content_write(entity: str, action: str) -> None:
	CONTENT_WRITES.labels(entity=entity, action=action).inc()


def inc_profile_update() -> None:
	PROFILE_UPDATES.inc()


def inc_reminder_change(action: str) -> None:
	REMINDER_CHANGES.labels(action=action).inc()


def inc_admin_action(action: str) -> None:
	ADMIN_ACTIONS.labels(action=action).inc()


def inc_search_query() -> None:
	SEARCH_QUERIES.inc()


def record_geocode(result: str, *, latency_seconds: float | None = None) -> None:
	GEOCODE_LOOKUPS.labels(result=result).inc()
	if latency_seconds is not None:
		GEOCODE_LATENCY.observe(latency_seconds)


def mark_postgres(ok: bool, *, latency_seconds: float | None = None) -> None:
	POSTGRES_UP.set(1 if ok else 0)
	if latency_seconds is not None:
		POSTGRES_LATENCY.observe(latency_seconds)
