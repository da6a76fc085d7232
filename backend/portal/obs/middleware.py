"""ASGI middleware for metrics and structured request logging."""

from __future__ import annotations

import time
from typing import Optional
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from portal.obs import logging as obs_logging
from portal.obs import metrics
from portal.settings import settings


def _route_template(request: Request) -> str:
	route = request.scope.get("route")
	if route and getattr(route, "path", None):
		return route.path  # type: ignore[return-value]
	return request.url.path


class ObservabilityMiddleware(BaseHTTPMiddleware):
	"""Instrument requests with metrics and structured logs."""

	def __init__(self, app, *, enabled: bool = True) -> None:
		super().__init__(app)
		self._enabled = enabled
		self._logger = obs_logging.get_logger("portal.http")

	async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
		if not settings.obs_enabled or not self._enabled:
			return await call_next(request)

		# RequestIdMiddleware wraps this one and has already chosen the id.
		request_id = getattr(request.state, "request_id", None) or uuid4().hex
		user_id = request.headers.get("X-User-Id")
		client = request.client
		client_ip = client.host if client else None
		token = obs_logging.bind_context(
			request_id=request_id,
			route=request.url.path,
			user_id=user_id,
			client_ip=client_ip,
		)
		start = time.perf_counter()
		status_code = 500
		response: Optional[Response] = None
		try:
			try:
				response = await call_next(request)
				status_code = response.status_code
			except Exception:
				self._logger.exception(
					"http_request_error",
					extra={"method": request.method, "path": request.url.path},
				)
				raise
			finally:
				elapsed_seconds = time.perf_counter() - start
				route_template = _route_template(request)
				metrics.observe_request(route_template, request.method, status_code, elapsed_seconds)

			response.headers.setdefault("X-Request-Id", request_id)
			self._logger.info(
				"http_request",
				extra={
					"status": status_code,
					"method": request.method,
					"latency_ms": round(elapsed_seconds * 1000, 3),
					"route": route_template,
				},
			)
			return response
		finally:
			obs_logging.reset_context(token)


def install(app, *, enabled: bool = True) -> None:
	app.add_middleware(ObservabilityMiddleware, enabled=enabled)
