"""Liveness and readiness probes.

Readiness runs each check under a short timeout; any failing check reports the
service as degraded with a 503 so the orchestrator stops routing to it.
"""

from __future__ import annotations

import asyncio
import logging
from time import perf_counter
from typing import Any, Dict, Tuple

from portal.infra import postgres
from portal.obs import metrics

LOGGER = logging.getLogger(__name__)

_POSTGRES_TIMEOUT_SECONDS = 0.3


async def _ping_postgres() -> float:
	pool = await postgres.get_pool()
	started = perf_counter()
	async with pool.acquire() as conn:
		await asyncio.wait_for(conn.execute("SELECT 1"), timeout=_POSTGRES_TIMEOUT_SECONDS)
	return perf_counter() - started


async def _postgres_check() -> Dict[str, Any]:
	try:
		elapsed = await _ping_postgres()
	except (asyncio.TimeoutError, *postgres.DB_ERRORS) as exc:
		metrics.mark_postgres(False)
		LOGGER.warning("postgres_unready", exc_info=True)
		return {"ok": False, "error": str(exc) or type(exc).__name__}
	metrics.mark_postgres(True, latency_seconds=elapsed)
	return {"ok": True, "latency_ms": round(elapsed * 1000, 2)}


async def liveness() -> Dict[str, Any]:
	return {"status": "ok"}


async def readiness() -> Tuple[int, Dict[str, Any]]:
	checks = {"postgres": await _postgres_check()}
	healthy = all(check["ok"] for check in checks.values())
	payload = {"status": "ok" if healthy else "degraded", "checks": checks}
	return (200 if healthy else 503), payload
