"""
IdeaBoard Backend — Access Log Middleware
===========================================

What:  One log line per request, naming the idea-board action it performed.
How:   After the route has run, the matched route template (left in the ASGI
       scope by the router) is mapped to an action name, and the idea id is
       taken from the path parameters. Unmatched paths log the raw path.

Example lines:
    2024-01-15T12:00:00 [INFO] ideaboard.access: vote idea=3f0c9a 200 4.2ms [1f2e3d4c] 127.0.0.1
    2024-01-15T12:00:01 [WARNING] ideaboard.access: add-note idea=missing 404 1.1ms [9a8b7c6d] 127.0.0.1
    2024-01-15T12:00:02 [INFO] ideaboard.access: GET /static/style.css 200 0.8ms [5e4d3c2b] 127.0.0.1

Request bodies, note text and uploaded file contents are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ideaboard.middleware.request_id import request_id_var

logger = logging.getLogger("ideaboard.access")

# (method, route template) → action name
ACTIONS = {
    ("GET", "/api/ideas"): "list-ideas",
    ("POST", "/api/ideas"): "create-idea",
    ("POST", "/api/ideas/{idea_id}/vote"): "vote",
    ("POST", "/api/ideas/{idea_id}/notes"): "add-note",
    ("GET", "/uploads/{file_name}"): "download",
    ("GET", "/"): "landing-page",
}

QUIET_ACTIONS = {"health"}


def describe(request: Request) -> str:
    """Action label for the log line, e.g. "vote idea=3f0c9a"."""
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template == "/health":
        return "health"

    action = ACTIONS.get((request.method, template))
    if action is None:
        return f"{request.method} {request.url.path}"

    idea_id = request.scope.get("path_params", {}).get("idea_id")
    return f"{action} idea={idea_id}" if idea_id else action


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        action = describe(request)
        if action in QUIET_ACTIONS:
            return response

        client_ip = request.client.host if request.client else "unknown"
        logger.log(
            level_for(response.status_code),
            "%s %d %.1fms [%s] %s",
            action,
            response.status_code,
            elapsed_ms,
            request_id_var.get(""),
            client_ip,
        )
        return response
