"""File server hit counting.

Every request under the static mount (/app) bumps a counter. The counter
lives on app.state so each application instance has its own; it is read
by GET /admin/metrics and zeroed by POST /admin/reset.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

STATIC_PREFIX = "/app"


class HitCounter:
    """Request counter shared by the middleware and the admin routes."""

    def __init__(self):
        self._hits = 0

    @property
    def hits(self) -> int:
        return self._hits

    def increment(self) -> None:
        self._hits += 1

    def reset(self) -> None:
        self._hits = 0


class FileserverHitsMiddleware(BaseHTTPMiddleware):
    """Count requests for static files."""

    def __init__(self, app, counter: HitCounter, prefix: str = STATIC_PREFIX):
        super().__init__(app)
        self.counter = counter
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path == self.prefix or path.startswith(f"{self.prefix}/"):
            self.counter.increment()
        return await call_next(request)
