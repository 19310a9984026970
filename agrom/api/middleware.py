import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from agrom.common.logging import get_logger
from agrom.config import settings

logger = get_logger("middleware")

_QUIET_PREFIXES = ("/static", "/health")


def _caller_kind(request: Request) -> str:
    if "authorization" in request.headers:
        return "bearer"
    if settings.SESSION_COOKIE_NAME in request.cookies:
        return "cookie"
    return "anonymous"


class AuditMiddleware(BaseHTTPMiddleware):
    """One log line per request with status, latency and how the caller authenticated."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000

        if not request.url.path.startswith(_QUIET_PREFIXES):
            logger.info(
                "%s %s -> %d in %.1fms (%s)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                _caller_kind(request),
            )

        response.headers["X-Request-Duration-Ms"] = f"{duration_ms:.1f}"
        return response
