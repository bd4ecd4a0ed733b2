"""
Fixed-window rate limiting for the public API, backed by Redis.

Each client IP gets ``max_requests`` per ``window_seconds`` under ``/api/``.
When Redis is unreachable requests are let through.
"""

import logging
import time

from redis.exceptions import RedisError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    PROTECTED_PREFIX = "/api/"

    def __init__(self, app: ASGIApp, max_requests: int = 100, window_seconds: int = 900):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(self.PROTECTED_PREFIX):
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time() // self.window_seconds)
        key = f"ratelimit:{client_ip}:{window}"

        try:
            redis = request.app.state.redis
            pipe = redis.pipeline(transaction=True)
            count, _ = await pipe.incr(key).expire(key, self.window_seconds).execute()
        except RedisError as exc:
            logger.warning(
                "Rate limiter unavailable, allowing request",
                extra={"client_ip": client_ip, "error": str(exc)},
            )
            return await call_next(request)

        if count > self.max_requests:
            retry_after = self.window_seconds - int(time.time()) % self.window_seconds
            logger.warning(
                "Rate limit exceeded",
                extra={"client_ip": client_ip, "count": count, "path": request.url.path},
            )
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests from this IP, please try again later."},
                headers={"Retry-After": str(retry_after)},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(self.max_requests - count)
        return response
