# fireaudit/middleware/request_id.py
from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Callable, Iterator, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Correlates log lines and audit rows. Set per HTTP request, per reminder
# sweep (worker or CLI), and left empty elsewhere.
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def new_request_id(prefix: str = "") -> str:
    rid = uuid.uuid4().hex
    return f"{prefix}-{rid}" if prefix else rid


@contextmanager
def bound_request_id(rid: str) -> Iterator[str]:
    token = request_id_ctx.set(rid)
    try:
        yield rid
    finally:
        request_id_ctx.reset(token)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse the caller's X-Request-ID when given, echo it on the response."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = (request.headers.get(REQUEST_ID_HEADER) or "").strip()[:64] or new_request_id()
        request.state.request_id = rid
        with bound_request_id(rid):
            resp = await call_next(request)
        resp.headers[REQUEST_ID_HEADER] = rid
        return resp
