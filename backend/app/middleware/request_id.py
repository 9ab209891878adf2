"""
Naviga8 Backend - Request ID Middleware
=========================================

What:  Gives every request a correlation ID and echoes it in X-Request-ID.
How:   A client-supplied ID is reused only when it is short and made of
       safe characters, since it ends up in log lines; anything else is
       replaced by a fresh 8-character ID. The ID lives in a ContextVar for
       loggers and handlers inside the stack, and in request.state for the
       catch-all 500 handler, which runs outside it.
When:  Outermost of our middlewares, so access lines and error bodies
       carry the ID.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"

_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(header_value: Optional[str]) -> str:
    """Return the client's ID when it is safe to log, otherwise a new one."""
    if header_value and _CLIENT_ID_PATTERN.fullmatch(header_value):
        return header_value
    return uuid.uuid4().hex[:8]


def current_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
