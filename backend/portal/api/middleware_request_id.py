"""Give every request an id, echoed back on the response as ``X-Request-Id``.

A caller-supplied id is kept only when it looks like an id; anything else is
replaced so log lines cannot be forged through the header.
"""

from __future__ import annotations

import re
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from portal.api.request_id import REQUEST_ID_ATTR

HEADER = "X-Request-Id"
_ACCEPTABLE_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _incoming_id(request: Request) -> str:
    supplied = request.headers.get(HEADER, "")
    return supplied if _ACCEPTABLE_ID.match(supplied) else uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        request_id = getattr(request.state, REQUEST_ID_ATTR, None) or _incoming_id(request)
        setattr(request.state, REQUEST_ID_ATTR, request_id)
        response = await call_next(request)
        response.headers.setdefault(HEADER, request_id)
        return response
