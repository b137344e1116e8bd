"""
IdeaBoard Backend — Idea Write Throttle
=========================================

What:  Caps how often one client IP can write to the idea board.
How:   Only POSTs under /api/ideas count (create, vote, add note). Each of
       those rewrites the whole ideas.json, so a client spamming votes would
       otherwise keep the store busy and race every other writer. Reads,
       downloads, static assets and /health are never throttled.

Algorithm: sliding window over per-IP timestamps kept in a deque.
    1. Drop timestamps that fell out of the window from the left
    2. Full deque → 429 with Retry-After (seconds until the oldest expires)
    3. Otherwise record the write and pass the request on

State is per process; several workers each enforce their own window.
"""

import logging
import math
import time
from collections import deque
from typing import Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ideaboard.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

THROTTLED_PREFIX = "/api/ideas"


def is_idea_write(request: Request) -> bool:
    """True for requests that end in a save of ideas.json."""
    return request.method == "POST" and request.url.path.startswith(THROTTLED_PREFIX)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Args:
        max_requests:   Idea writes allowed per IP within one window
        window_seconds: Window length in seconds
    """

    def __init__(self, app, max_requests: int = 60, window_seconds: int = 60, **kwargs):
        super().__init__(app, **kwargs)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._writes: Dict[str, Deque[float]] = {}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not is_idea_write(request):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        now = time.monotonic()
        retry_after = self._register(client_ip, now)

        if retry_after is not None:
            logger.warning(
                "Throttled %s %s from %s (%d writes in %ds)",
                request.method,
                request.url.path,
                client_ip,
                self.max_requests,
                self.window_seconds,
            )
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": (
                        f"Too many changes to the idea board. "
                        f"Try again in {retry_after} seconds."
                    ),
                    "details": {"retry_after": retry_after},
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

    def _register(self, client_ip: str, now: float):
        """
        Record one write for client_ip.

        Returns:
            None when the write is allowed, otherwise the Retry-After seconds.
        """
        cutoff = now - self.window_seconds
        self._forget_idle(cutoff)

        writes = self._writes.setdefault(client_ip, deque())
        while writes and writes[0] <= cutoff:
            writes.popleft()

        if len(writes) >= self.max_requests:
            return max(1, math.ceil(writes[0] + self.window_seconds - now))

        writes.append(now)
        return None

    def _forget_idle(self, cutoff: float) -> None:
        """Drop IPs whose latest write is older than the window."""
        idle = [ip for ip, writes in self._writes.items() if not writes or writes[-1] <= cutoff]
        for ip in idle:
            del self._writes[ip]
