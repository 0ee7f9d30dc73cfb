"""
Measurebook Backend - Request Logging Middleware
==================================================

What:  One access log line per API call, naming the project it touched.
How:   After the route has run, reads the matched route template and the
       `project_id` path parameter from the ASGI scope, so the line says
       `PUT /api/projects/{project_id} project=3f2a…` rather than a raw URL.
Who:   Applied to every request via Starlette middleware, inside RequestIDMiddleware.

Levels:
    5xx                         → ERROR
    4xx                         → WARNING
    successful writes           → INFO   (POST / PUT / DELETE)
    successful reads            → DEBUG  (the frontend polls the list)

Request bodies are never logged; they carry whole record trees.
"""

import logging
import time
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from measurebook.middleware.request_id import request_id_var

logger = logging.getLogger("measurebook.access")

# Liveness probes
QUIET_PATHS = frozenset({"/", "/health"})

WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


def _project_id(request: Request) -> Optional[str]:
    return request.scope.get("path_params", {}).get("project_id")


def access_level(method: str, status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    if method in WRITE_METHODS:
        return logging.INFO
    return logging.DEBUG


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        level = access_level(request.method, response.status_code)
        if not logger.isEnabledFor(level):
            return response

        project_id = _project_id(request)
        logger.log(
            level,
            "[%s] %s %s%s → %d (%.1fms)",
            request_id_var.get(""),
            request.method,
            _route_template(request),
            f" project={project_id}" if project_id else "",
            response.status_code,
            elapsed_ms,
        )
        return response
