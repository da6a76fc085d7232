"""Forward geocoding against a Nominatim-compatible search endpoint."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from portal.obs import metrics as obs_metrics
from portal.settings import settings

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Coordinates:
	lat: float
	lon: float


def build_query(city: Optional[str], country: Optional[str]) -> Optional[str]:
	parts = [part.strip() for part in (city, country) if part and part.strip()]
	return ", ".join(parts) if parts else None


async def geocode(
	city: Optional[str],
	country: Optional[str],
	*,
	transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Optional[Coordinates]:
	"""Resolve ``city, country`` to coordinates, or None when nothing matches."""
	query = build_query(city, country)
	if query is None:
		return None
	params = {"q": query, "format": "json", "limit": 1}
	headers = {"User-Agent": settings.geocoding_user_agent}
	start = time.perf_counter()
	try:
		async with httpx.AsyncClient(
			timeout=settings.geocoding_timeout_seconds,
			headers=headers,
			transport=transport,
		) as client:
			response = await client.get(settings.geocoding_url, params=params)
			response.raise_for_status()
			payload = response.json()
	except (httpx.HTTPError, ValueError):
		obs_metrics.record_geocode("error", latency_seconds=time.perf_counter() - start)
		logger.warning("Geocoding request failed", extra={"query": query}, exc_info=True)
		return None

	latency = time.perf_counter() - start
	if not isinstance(payload, list) or not payload:
		obs_metrics.record_geocode("miss", latency_seconds=latency)
		return None
	first = payload[0]
	try:
		coords = Coordinates(lat=float(first["lat"]), lon=float(first["lon"]))
	except (KeyError, TypeError, ValueError):
		obs_metrics.record_geocode("error", latency_seconds=latency)
		logger.warning("Geocoding response malformed", extra={"query": query})
		return None
	obs_metrics.record_geocode("hit", latency_seconds=latency)
	return coords
