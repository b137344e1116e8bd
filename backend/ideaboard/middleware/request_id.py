"""
IdeaBoard Backend — Request ID Middleware
===========================================

What:  Tags every request with a short correlation ID, visible in the access
       log, in error bodies and in the X-Request-ID response header.
How:   A client-supplied X-Request-ID is reused when it is a plain token
       (letters, digits, "-", "_", ".", at most 64 chars); anything else is
       replaced by the first 8 hex characters of a uuid4, so arbitrary header
       content never reaches the log.
When:  Outermost middleware: throttled and failed requests carry the ID too.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

_TOKEN_RE = re.compile(r"[A-Za-z0-9._-]{1,64}")

# Read by the access log, the write throttle and the exception handlers
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def choose_request_id(supplied: Optional[str]) -> str:
    """Return the client's ID if it is a safe token, else a fresh one."""
    if supplied and _TOKEN_RE.fullmatch(supplied):
        return supplied
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = choose_request_id(request.headers.get(REQUEST_ID_HEADER))
        # Not reset afterwards: the catch-all error handler runs outside this
        # middleware and still reads it
        request_id_var.set(rid)
        request.state.request_id = rid
        response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
