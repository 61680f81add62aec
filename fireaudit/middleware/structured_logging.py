# fireaudit/middleware/structured_logging.py
from __future__ import annotations

import logging
import re
import time
from typing import Any, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..config import settings

log = logging.getLogger("fireaudit.request")

# /api/clients/12/... and /api/inspections/34/... carry the entity on the access line
_ENTITY_PATH = re.compile(r"/(clients|inspections)/(\d+)(?:/|$)")
_ENTITY_KEY = {"clients": "client_id", "inspections": "inspection_id"}


def path_entities(path: str) -> dict[str, int]:
    """Entity ids named by a request path, keyed by their log field."""
    out: dict[str, int] = {}
    for kind, ident in _ENTITY_PATH.findall(path or ""):
        out[_ENTITY_KEY[kind]] = int(ident)
    return out


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    One access line per request. Method, path, status, latency, the caller's
    header identity and any client / inspection id in the path go out as
    structured fields; the JSON formatter adds the request id.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        t0 = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            extra: dict[str, Any] = {
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "latency_ms": int((time.perf_counter() - t0) * 1000),
                "user_email": request.headers.get(settings.dev_header_user_email),
                **path_entities(request.url.path),
            }
            level = logging.WARNING if status_code >= 500 else logging.INFO
            log.log(level, "%s %s -> %s", request.method, request.url.path, status_code, extra=extra)
