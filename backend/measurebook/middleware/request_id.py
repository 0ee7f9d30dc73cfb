"""
Measurebook Backend - Request ID Middleware
=============================================

What:  Tags each request with a correlation ID and echoes it back in the
       X-Request-ID response header.
How:   A client-supplied X-Request-ID is reused when it is short and made of
       safe characters; anything else (missing, too long, spaces, control
       characters) is replaced by 8 hex characters of a fresh UUID. The ID
       lives in a ContextVar for the duration of the request.
Who:   Applied to every request via Starlette middleware.

Every log line and error body for a request carries the same ID, so a
client can quote it when reporting a failed save.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

HEADER = "X-Request-ID"

# Echoed into log lines and headers, so keep it printable and bounded
_CLIENT_ID = re.compile(r"[A-Za-z0-9._:-]{1,64}")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def resolve_request_id(header_value: Optional[str]) -> str:
    if header_value and _CLIENT_ID.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(HEADER))
        # Not reset afterwards: the catch-all 500 handler runs outside this
        # middleware and still reads it.
        request_id_var.set(rid)

        response = await call_next(request)
        response.headers[HEADER] = rid
        return response
