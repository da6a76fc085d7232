"""Access token verification for tokens minted by the hosted auth service.

Tokens are HS256 JWTs signed with the project's JWT secret. We validate the
standard claims and the expected audience, and never issue tokens ourselves
outside of tests.
"""

from __future__ import annotations

import time
from typing import Any, Dict

import jwt
from jwt import InvalidTokenError

from portal.settings import settings


def encode_access(payload: dict[str, object], *, ttl_seconds: int = 3600) -> str:
	"""Encode an access token shaped like the hosted service's tokens."""
	now = int(time.time())
	body: Dict[str, Any] = {"aud": settings.jwt_audience, "iat": now, "exp": now + ttl_seconds}
	body.update(payload)
	return jwt.encode(body, settings.jwt_secret, algorithm="HS256")


def decode_access(token: str) -> dict[str, object]:
	"""Decode and validate an access token.

	Raises jwt.InvalidTokenError subclasses on failure.
	"""
	payload = jwt.decode(
		token,
		settings.jwt_secret,
		algorithms=["HS256"],
		audience=settings.jwt_audience,
		leeway=5,
		options={"require": ["exp", "sub"]},
	)
	if not str(payload.get("sub") or "").strip():
		raise InvalidTokenError("missing_claim:sub")
	return payload  # type: ignore[return-value]
